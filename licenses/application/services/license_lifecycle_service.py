"""
License lifecycle service.

Owns the in-memory and persisted license state, runs the periodic
connectivity and revalidation loop, applies the offline grace policy and
derives whether premium features are enabled.
"""
import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, TypeVar

from core.config import LicensingSettings
from core.domain.events import DomainEvent, EventBus, utcnow
from core.domain.exceptions import (
    LicenseActivationError,
    LicenseApiTransportError,
    ProductMismatchError,
)
from core.domain.value_objects import LicenseKeyValue
from core.infrastructure.events import CallbackEventHandler, InMemoryEventBus
from core.infrastructure.notifications import LoggingNotifier, NotificationPort
from licenses.application.dto.license_dto import LicenseResponseDTO
from licenses.domain.events import (
    LicenseActivated,
    LicenseDeactivated,
    LicenseExpired,
    LicenseRevoked,
    LicenseStatusChanged,
    LicenseValidated,
    PremiumReEnabled,
    PremiumTemporarilyDisabled,
)
from licenses.domain.license import (
    DerivedFlags,
    EffectiveLicenseInfo,
    LicenseRecord,
    LifecycleState,
)
from licenses.domain.services import (
    LICENSE_KEY_NOT_FOUND_ERROR,
    InstanceNameGenerator,
    LicenseKeyValidator,
    OfflineGracePolicy,
    PremiumAccessPolicy,
    ProductVerifier,
)
from licenses.ports.connectivity import ConnectivityProber
from licenses.ports.license_api import LicenseApiPort
from licenses.ports.license_state_repository import LicenseStateRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

StatusListener = Callable[[bool, Optional[EffectiveLicenseInfo]], object]


class Messages:
    """User-facing lifecycle notices."""

    TEMPORARILY_DISABLED = "Premium features temporarily disabled due to offline duration limit."
    RE_ENABLED = "Premium features have been re-enabled."
    EXPIRED = "Your license has expired. Please renew to continue using premium features."
    NOT_FOUND_REMOVED = (
        "Your license key was not found and has been removed. "
        "It may have been regenerated or revoked."
    )
    DEACTIVATED = "License has been deactivated."


class LicenseLifecycleService:
    """
    License lifecycle state machine.

    All operations (periodic ticks and user commands) are serialised
    through a single asyncio lock. Listeners and other event handlers
    run after the lock is released, with immutable snapshots.
    """

    def __init__(
        self,
        settings: LicensingSettings,
        api_client: LicenseApiPort,
        prober: ConnectivityProber,
        repository: LicenseStateRepository,
        notifier: Optional[NotificationPort] = None,
        event_bus: Optional[EventBus] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the lifecycle service.

        Args:
            settings: Licensing settings
            api_client: Licensing service client
            prober: Connectivity prober
            repository: Persisted license state
            notifier: User notification channel
            event_bus: Bus lifecycle events are published on
            clock: Returns the current timezone-aware time
        """
        self.settings = settings
        self.api_client = api_client
        self.prober = prober
        self.repository = repository
        self.notifier = notifier or LoggingNotifier()
        self.event_bus = event_bus or InMemoryEventBus()
        self.clock = clock or utcnow

        self.grace_policy = OfflineGracePolicy(settings.offline_duration_limit)
        self.product_verifier = ProductVerifier(settings.store_id, settings.product_id)

        self._record: Optional[LicenseRecord] = None
        self._flags = DerivedFlags()
        self._last_online_at: Optional[datetime] = None
        self._offline_since: Optional[datetime] = None
        self._is_online: Optional[bool] = None

        self._lock = asyncio.Lock()
        self._pending_events: List[DomainEvent] = []
        self._task: Optional[asyncio.Task] = None
        self._ticking = False
        self._disposed = False
        self._generation = 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_online(self) -> Optional[bool]:
        """Result of the latest probe, None before the first one."""
        return self._is_online

    @property
    def flags(self) -> DerivedFlags:
        return self._flags

    @property
    def last_online_at(self) -> Optional[datetime]:
        return self._last_online_at

    def get_license_info(self) -> Optional[EffectiveLicenseInfo]:
        """
        Current effective license information.

        Returns:
            EffectiveLicenseInfo, or None when no license is stored
        """
        if self._record is None:
            return None
        return EffectiveLicenseInfo.derive(self._record, self._flags)

    def is_premium_enabled(self) -> bool:
        """Whether premium features may run. Never performs I/O."""
        return PremiumAccessPolicy.is_premium_enabled(self.get_license_info())

    def lifecycle_state(self) -> LifecycleState:
        return PremiumAccessPolicy.lifecycle_state(self._record, self._flags)

    def on_status_change(self, listener: StatusListener) -> Callable[[], None]:
        """
        Register a status listener.

        Args:
            listener: Called with (is_online, license_info_or_none) after
                every tick and every state-changing command. May be a
                plain function or a coroutine function.

        Returns:
            Callable that removes the listener
        """
        handler = CallbackEventHandler(
            lambda event: listener(event.is_online, event.license_info)
        )
        self.event_bus.subscribe(LicenseStatusChanged, handler)
        return lambda: self.event_bus.unsubscribe(LicenseStatusChanged, handler)

    # ------------------------------------------------------------------
    # Lifecycle of the service itself
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Load the persisted state into memory."""
        state = await self.repository.load()
        self._record = state.record
        self._flags = state.flags
        self._last_online_at = state.last_online_at
        self._offline_since = state.offline_since
        logger.info(
            "Loaded license state: %s",
            self.lifecycle_state().value,
        )

    async def initialize(self) -> None:
        """Load state, run the startup check and start periodic checks."""
        await self.load()
        await self.check_initial_status()
        self.start()

    def start(self) -> None:
        """Start the periodic check loop."""
        if self._task is not None and not self._task.done():
            return
        self._disposed = False
        # A loop left running by an earlier dispose() exits on its next check
        self._generation += 1
        self._task = asyncio.get_running_loop().create_task(
            self._run_periodic_checks(self._generation)
        )
        logger.debug(
            "Periodic license checks every %ss", self.settings.ping_interval.total_seconds()
        )

    def dispose(self) -> None:
        """
        Stop the periodic check loop.

        A tick already talking to the network is allowed to finish, but
        its results are discarded.
        """
        self._disposed = True
        if self._task is not None and not self._task.done() and not self._ticking:
            self._task.cancel()
        self._task = None
        logger.debug("License lifecycle service disposed")

    def _loop_current(self, generation: int) -> bool:
        return not self._disposed and generation == self._generation

    async def _run_periodic_checks(self, generation: int) -> None:
        interval = self.settings.ping_interval.total_seconds()
        while self._loop_current(generation):
            await asyncio.sleep(interval)
            if not self._loop_current(generation):
                break
            try:
                await self.tick()
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error("Periodic license check failed: %s", e, exc_info=True)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def check_initial_status(self) -> None:
        """Probe immediately at startup."""
        await self._exclusive(lambda: self._probe_and_apply(initial=True))

    async def tick(self) -> None:
        """One periodic connectivity and validation check."""
        self._ticking = True
        try:
            await self._exclusive(lambda: self._probe_and_apply(initial=False))
        finally:
            self._ticking = False

    async def validate(self) -> None:
        """Revalidate the stored license with the licensing service."""

        async def run():
            await self._validate_current_license()
            self._queue_status()

        await self._exclusive(run)

    async def activate(self, license_key: str) -> EffectiveLicenseInfo:
        """
        Activate a license key on this installation.

        Args:
            license_key: Key in 8-4-4-4-12 hexadecimal form

        Returns:
            EffectiveLicenseInfo of the new license

        Raises:
            InvalidLicenseKeyFormatError: If the key is malformed
            LicenseActivationError: If the service refused the activation
            ProductMismatchError: If the key belongs to another product
            LicenseApiTransportError: If the service could not be reached
        """
        key = LicenseKeyValidator.validate_format(license_key)
        return await self._exclusive(lambda: self._activate(key))

    async def deactivate(self) -> None:
        """
        Deactivate the stored license.

        The local license is cleared even when the licensing service could
        not be reached; the transport error is raised afterwards.

        Raises:
            LicenseApiTransportError: If the remote deactivation failed
        """

        async def run():
            try:
                await self._deactivate(user_initiated=True)
            finally:
                self._queue_status()

        await self._exclusive(run)

    # ------------------------------------------------------------------
    # Internals (always called with the lock held)
    # ------------------------------------------------------------------

    async def _exclusive(self, operation: Callable[[], Awaitable[T]]) -> T:
        try:
            async with self._lock:
                return await operation()
        finally:
            await self._flush_events()

    async def _flush_events(self) -> None:
        events, self._pending_events = self._pending_events, []
        if self._disposed:
            return
        for event in events:
            await self.event_bus.publish(event)

    def _queue(self, event: DomainEvent) -> None:
        self._pending_events.append(event)

    def _queue_status(self) -> None:
        self._queue(
            LicenseStatusChanged(
                is_online=bool(self._is_online),
                license_info=self.get_license_info(),
            )
        )

    async def _probe_and_apply(self, initial: bool) -> None:
        online = await self.prober.probe()
        if self._disposed:
            logger.debug("Discarding probe result after dispose")
            return

        now = self.clock()
        self._is_online = online

        if online:
            self._last_online_at = now
            await self.repository.save_last_online(now)
            if self._offline_since is not None:
                self._offline_since = None
                await self.repository.save_offline_since(None)
            if not initial or self.settings.validate_on_startup:
                await self._validate_current_license()
        else:
            if self._offline_since is None:
                self._offline_since = now
                await self.repository.save_offline_since(now)
            if (
                self._record is not None
                and not self._flags.temporarily_disabled
                and self.grace_policy.is_exceeded(now, self._last_online_at)
            ):
                await self._temporarily_disable(now)

        self._queue_status()

    async def _temporarily_disable(self, now: datetime) -> None:
        duration = self.grace_policy.offline_duration(now, self._last_online_at)
        self._flags = replace(self._flags, temporarily_disabled=True)
        await self.repository.save_flags(self._flags)
        logger.warning("Offline for %s, premium features temporarily disabled", duration)
        self.notifier.show_warning(Messages.TEMPORARILY_DISABLED)
        self._queue(PremiumTemporarilyDisabled(self._record.instance_id, duration))

    async def _validate_current_license(self) -> None:
        record = self._record
        if record is None:
            return

        try:
            response = await self.api_client.validate(record.license_key, record.instance_id)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("License validation failed (unexpected error): %s", e, exc_info=True)
            return

        if self._disposed:
            logger.debug("Discarding validation result after dispose")
            return

        # Not-found wins over every other field of the response
        if response.error == LICENSE_KEY_NOT_FOUND_ERROR:
            await self._revoke()
        elif response.is_expired:
            await self._apply_expired(response)
        elif response.valid:
            await self._apply_valid(response)
        else:
            logger.warning("License rejected by licensing service: %s", response.error)
            await self._deactivate(user_initiated=False)

    async def _apply_valid(self, response: LicenseResponseDTO) -> None:
        was_disabled = self._flags.temporarily_disabled
        self._record = response.to_record(fallback=self._record)
        self._flags = DerivedFlags()
        await self.repository.save_record(self._record)
        await self.repository.save_flags(self._flags)

        if was_disabled:
            logger.info("Premium features re-enabled for instance %s", self._record.instance_id)
            self.notifier.show_info(Messages.RE_ENABLED)
            self._queue(PremiumReEnabled(self._record.instance_id))
        self._queue(LicenseValidated(self._record.instance_id))

    async def _revoke(self) -> None:
        instance_id = self._record.instance_id
        await self._clear_local()
        logger.info("License key not found on server, removed instance %s", instance_id)
        self.notifier.show_info(Messages.NOT_FOUND_REMOVED)
        self._queue(LicenseRevoked(instance_id))

    async def _apply_expired(self, response: LicenseResponseDTO) -> None:
        first_of_episode = not self._flags.expiration_notification_shown
        self._record = response.to_record(fallback=self._record)
        self._flags = replace(self._flags, expired=True, expiration_notification_shown=True)
        await self.repository.save_record(self._record)
        await self.repository.save_flags(self._flags)

        if first_of_episode:
            logger.warning("License for instance %s has expired", self._record.instance_id)
            self.notifier.show_warning(Messages.EXPIRED)
            self._queue(LicenseExpired(self._record.instance_id, self._record.expires_at))

    async def _activate(self, key: LicenseKeyValue) -> EffectiveLicenseInfo:
        now = self.clock()
        instance_name = InstanceNameGenerator.generate(self.settings.instance_name_prefix, now)
        response = await self.api_client.activate(str(key), instance_name)

        if not response.activated or response.instance is None:
            raise LicenseActivationError(
                response.error or "Activation failed: Missing instance data"
            )

        if not self.product_verifier.matches(response.meta.store_id, response.meta.product_id):
            logger.warning(
                "Activated key belongs to store %s / product %s",
                response.meta.store_id,
                response.meta.product_id,
            )
            raise ProductMismatchError()

        self._record = response.to_record()
        self._flags = replace(self._flags, expired=False, expiration_notification_shown=False)
        await self.repository.save_record(self._record)
        await self.repository.save_flags(self._flags)

        # A successful activation proves the service is reachable
        self._is_online = True
        self._last_online_at = now
        await self.repository.save_last_online(now)

        logger.info("License %s activated as instance %s", key.masked(), self._record.instance_id)
        self._queue(
            LicenseActivated(
                self._record.instance_id,
                self._record.instance_name,
                self._record.product_name,
            )
        )
        self._queue_status()
        return self.get_license_info()

    async def _deactivate(self, user_initiated: bool) -> None:
        record = self._record
        if record is None:
            return

        transport_error: Optional[LicenseApiTransportError] = None
        remote_confirmed = False
        try:
            response = await self.api_client.deactivate(record.license_key, record.instance_id)
            remote_confirmed = response.error is None
            if response.error:
                logger.info("Licensing service refused deactivation: %s", response.error)
        except LicenseApiTransportError as e:
            logger.error("Failed to deactivate license on server: %s", e, exc_info=True)
            transport_error = e
        finally:
            await self._clear_local()

        self._queue(LicenseDeactivated(record.instance_id, remote_confirmed))

        if user_initiated:
            if transport_error is not None:
                raise transport_error
            self.notifier.show_info(Messages.DEACTIVATED)

    async def _clear_local(self) -> None:
        self._record = None
        self._flags = DerivedFlags()
        await self.repository.clear()
