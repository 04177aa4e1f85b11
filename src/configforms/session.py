"""Edit session: owns one editable tree from open until submit or cancel."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import uuid4

from configforms.exceptions import SessionError
from configforms.form import MISSING, FormNode, compile_form, serialize
from configforms.logging import get_logger, session_context
from configforms.pointer import SnapshotFeed
from configforms.schema import check_defaults, load_config_spec
from configforms.typing.enums import SessionState, SubmitStatus
from configforms.typing.models import FieldError, SubmitResult

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from configforms.typing.models import ValueSpec
    from configforms.typing.protocol import SnapshotListener, SubmitHandler

logger = get_logger(__name__)


class FormSession:
    """Single-owner edit session around a compiled form.

    Edits go straight to the nodes of ``root``. ``submit`` serializes the tree,
    refuses to call the handler while any field is invalid, and guards against
    a second submit while one is outstanding. A failed submit leaves the
    session open with every edit intact; a successful one closes it.
    """

    def __init__(
        self,
        spec: ValueSpec,
        initial: object = MISSING,
        *,
        handler: SubmitHandler,
        feed: SnapshotFeed | None = None,
    ) -> None:
        """Open a session.

        Args:
            spec: Parsed spec tree.
            initial: Current value, or ``MISSING`` to start from defaults.
            handler: Receives the serialized value on submit.
            feed: Package snapshot feed for pointer fields.

        Raises:
            SchemaDefectError: If a declared default breaks its own field; no session is opened.
        """
        check_defaults(spec)
        self.id = uuid4().hex
        self.spec = spec
        self.feed = feed or SnapshotFeed()
        self._handler = handler
        self._root: FormNode | None = compile_form(spec, initial, feed=self.feed)
        self._state = SessionState.OPEN
        self._unsubscribers: list[Callable[[], None]] = []
        with session_context(self.id):
            logger.info("Edit session opened", extra={"field": spec.name})

    @classmethod
    def from_document(
        cls,
        document: Mapping[str, Any],
        initial: object = MISSING,
        *,
        handler: SubmitHandler,
        feed: SnapshotFeed | None = None,
        title: str = "Config",
    ) -> FormSession:
        """Open a session on a package's top-level config spec document.

        Args:
            document: Field key to spec document.
            initial: Current value.
            handler: Submit handler.
            feed: Package snapshot feed.
            title: Label of the root object.

        Raises:
            SchemaDefectError: If the document is defective; no session is opened.

        Returns:
            FormSession: Open session.
        """
        return cls(load_config_spec(document, name=title), initial, handler=handler, feed=feed)

    @property
    def state(self) -> SessionState:
        """Return the lifecycle state."""
        return self._state

    @property
    def root(self) -> FormNode:
        """Return the editable tree.

        Raises:
            SessionError: If the session is closed.
        """
        if self._root is None:
            raise SessionError(message="Edit session is closed")
        return self._root

    def errors(self) -> list[FieldError]:
        """Return the validation summary of the whole tree."""
        return list(self.root.iter_errors())

    def subscribe(self, listener: SnapshotListener) -> None:
        """Re-render hook: call ``listener`` on every new package snapshot until the session ends.

        Args:
            listener: Callback receiving each new snapshot.
        """
        self._unsubscribers.append(self.feed.subscribe(listener))

    async def submit(self) -> SubmitResult:
        """Serialize the tree and hand it to the submit handler.

        Raises:
            SessionError: If the session is closed or a submit is already outstanding.

        Returns:
            SubmitResult: Invalid, failed or succeeded outcome.
        """
        if self._state is SessionState.SUBMITTING:
            raise SessionError(message="A submit is already in progress")
        root = self.root

        with session_context(self.id):
            value = serialize(root)
            errors = list(root.iter_errors())
            if errors:
                logger.info("Submit blocked by invalid fields", extra={"error_count": len(errors)})
                return SubmitResult(status=SubmitStatus.INVALID, value=value, errors=errors)

            self._state = SessionState.SUBMITTING
            try:
                response = await self._handler(value)
            except Exception as exc:
                logger.exception("Submit failed")
                return SubmitResult(status=SubmitStatus.FAILED, value=value, error=str(exc))
            finally:
                if self._state is SessionState.SUBMITTING:
                    self._state = SessionState.OPEN

            logger.info("Submit succeeded")
            self._close()
            return SubmitResult(status=SubmitStatus.SUCCEEDED, value=value, response=response)

    def cancel(self) -> None:
        """Discard the tree without side effects.

        Raises:
            SessionError: If a submit is outstanding.
        """
        if self._state is SessionState.SUBMITTING:
            raise SessionError(message="Cannot cancel while a submit is in progress")
        if self._state is SessionState.CLOSED:
            return
        with session_context(self.id):
            logger.info("Edit session cancelled")
        self._close()

    def _close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._root = None
        self._state = SessionState.CLOSED
