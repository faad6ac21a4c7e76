"""
License DTOs for licensing service responses.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from core.domain.value_objects import LicenseStatus
from licenses.domain.license import LicenseRecord, parse_timestamp


@dataclass(frozen=True)
class LicenseKeyDTO:
    """DTO for the license_key part of a response."""

    id: Optional[int]
    status: LicenseStatus
    key: Optional[str]
    activation_limit: Optional[int]
    activation_usage: Optional[int]
    created_at: Optional[datetime]
    expires_at: Optional[datetime]

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["LicenseKeyDTO"]:
        if not data:
            return None
        return cls(
            id=data.get("id"),
            status=LicenseStatus.parse(data.get("status")),
            key=data.get("key"),
            activation_limit=data.get("activation_limit"),
            activation_usage=data.get("activation_usage"),
            created_at=parse_timestamp(data.get("created_at")),
            expires_at=parse_timestamp(data.get("expires_at")),
        )


@dataclass(frozen=True)
class InstanceDTO:
    """DTO for the instance part of a response."""

    id: str
    name: Optional[str]
    created_at: Optional[datetime]

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["InstanceDTO"]:
        if not data or not data.get("id"):
            return None
        return cls(
            id=str(data["id"]),
            name=data.get("name"),
            created_at=parse_timestamp(data.get("created_at")),
        )


@dataclass(frozen=True)
class LicenseMetaDTO:
    """DTO for the meta part of a response."""

    store_id: Optional[int] = None
    order_id: Optional[int] = None
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    variant_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LicenseMetaDTO":
        data = data or {}
        return cls(
            store_id=data.get("store_id"),
            order_id=data.get("order_id"),
            product_id=data.get("product_id"),
            product_name=data.get("product_name"),
            variant_id=data.get("variant_id"),
            customer_name=data.get("customer_name"),
            customer_email=data.get("customer_email"),
        )


@dataclass(frozen=True)
class LicenseResponseDTO:
    """
    DTO for an activate, validate or deactivate response.

    Both successful answers and structured rejections (HTTP 400/404)
    are represented by this DTO.
    """

    error: Optional[str] = None
    activated: bool = False
    valid: bool = False
    deactivated: bool = False
    license_key: Optional[LicenseKeyDTO] = None
    instance: Optional[InstanceDTO] = None
    meta: LicenseMetaDTO = field(default_factory=LicenseMetaDTO)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LicenseResponseDTO":
        """
        Build a response DTO from a decoded JSON body.

        Args:
            data: Decoded JSON body

        Returns:
            LicenseResponseDTO
        """
        data = data or {}
        return cls(
            error=data.get("error"),
            activated=bool(data.get("activated")),
            valid=bool(data.get("valid")),
            deactivated=bool(data.get("deactivated")),
            license_key=LicenseKeyDTO.from_dict(data.get("license_key")),
            instance=InstanceDTO.from_dict(data.get("instance")),
            meta=LicenseMetaDTO.from_dict(data.get("meta")),
        )

    @property
    def is_expired(self) -> bool:
        """True when the license_key sub-record reports an expired status."""
        return self.license_key is not None and self.license_key.status == LicenseStatus.EXPIRED

    def to_record(self, fallback: Optional[LicenseRecord] = None) -> LicenseRecord:
        """
        Build a LicenseRecord from this response.

        Fields the response leaves out (validate answers may omit the
        instance) are taken from the fallback record.

        Args:
            fallback: Currently stored record

        Returns:
            LicenseRecord

        Raises:
            ValueError: If neither the response nor the fallback carry a
                license key and an instance id
        """
        key = self.license_key
        instance = self.instance
        return LicenseRecord(
            license_key=(key.key if key and key.key else None)
            or (fallback.license_key if fallback else None),
            instance_id=(instance.id if instance else None)
            or (fallback.instance_id if fallback else None),
            instance_name=(instance.name if instance else None)
            or (fallback.instance_name if fallback else None),
            status=key.status if key else (fallback.status if fallback else LicenseStatus.INACTIVE),
            expires_at=key.expires_at if key else (fallback.expires_at if fallback else None),
            activation_limit=key.activation_limit if key else None,
            activation_usage=key.activation_usage if key else None,
            created_at=key.created_at if key else None,
            product_name=self.meta.product_name,
            customer_name=self.meta.customer_name,
            customer_email=self.meta.customer_email,
        )
