"""
Classifies raw command-line tokens into a URL, an output location and flags.

The scan is a small automaton: every token is mapped to a ``TokenKind``, the
current ``ScanState`` picks a selector for that kind (is the flag already set,
which slot is still free), and the pair is looked up in ``TRANSITIONS`` to get
the next state. Errors are accumulated rather than raised so that every
problem with an invocation is reported at once.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from enum import Enum

from pls_cli.exceptions import (
    BadArguments,
    ClassificationError,
    FlagReused,
    MissingUrl,
    TooManyArguments,
)
from pls_cli.models.intent import ClassifiedIntent

log = logging.getLogger(__name__)

MAX_TOKENS = 4

FORCE_FLAGS = ("-f", "--force")
MEDIA_FLAGS = ("-m", "--media")


class Action(Enum):
    """What the invocation asks the program to do."""

    HELP = "help"
    VERSION = "version"
    UPDATE = "update"
    DOWNLOAD = "download"


SHORT_CIRCUITS = {
    "-v": Action.VERSION,
    "--version": Action.VERSION,
    "-h": Action.HELP,
    "--help": Action.HELP,
    "-u": Action.UPDATE,
    "--update": Action.UPDATE,
}


class TokenKind(Enum):
    FORCE = "force"
    MEDIA = "media"
    FREE = "free"


class Slot(Enum):
    URL = "url"
    OUTPUT = "output"
    NONE = "none"


@dataclass(frozen=True)
class ScanState:
    url: str | None = None
    output: str | None = None
    force: bool = False
    media: bool = False
    errors: tuple[ClassificationError, ...] = ()

    def fail(self, error: ClassificationError) -> "ScanState":
        log.debug(f"Classification error: {error}")
        return replace(self, errors=self.errors + (error,))

    def free_slot(self) -> Slot:
        if self.url is None:
            return Slot.URL
        if self.output is None:
            return Slot.OUTPUT
        return Slot.NONE


def token_kind(token: str) -> TokenKind:
    if token in FORCE_FLAGS:
        return TokenKind.FORCE
    if token in MEDIA_FLAGS:
        return TokenKind.MEDIA
    return TokenKind.FREE


Transition = Callable[[ScanState, str], ScanState]

TRANSITIONS: dict[tuple[TokenKind, object], Transition] = {
    (TokenKind.FORCE, False): lambda s, _: replace(s, force=True),
    (TokenKind.FORCE, True): lambda s, _: s.fail(FlagReused("-f/--force")),
    (TokenKind.MEDIA, False): lambda s, _: replace(s, media=True),
    (TokenKind.MEDIA, True): lambda s, _: s.fail(FlagReused("-m/--media")),
    (TokenKind.FREE, Slot.URL): lambda s, tok: replace(s, url=tok),
    (TokenKind.FREE, Slot.OUTPUT): lambda s, tok: replace(s, output=tok),
    (TokenKind.FREE, Slot.NONE): lambda s, _: s.fail(BadArguments()),
}


def _selector(state: ScanState, kind: TokenKind) -> object:
    if kind is TokenKind.FORCE:
        return state.force
    if kind is TokenKind.MEDIA:
        return state.media
    return state.free_slot()


def step(state: ScanState, token: str) -> ScanState:
    """Advances the scan by one token."""
    kind = token_kind(token)
    return TRANSITIONS[(kind, _selector(state, kind))](state, token)


def classify(leading_token: str, remaining_tokens: Sequence[str]) -> ClassifiedIntent:
    """
    Scans the leading token and the remaining tokens into a ClassifiedIntent.

    Tokens past the fourth position are not classified and each one adds a
    TooManyArguments error. A missing URL is always reported, even when other
    errors were already recorded.
    """
    tokens = [leading_token, *remaining_tokens]
    state = ScanState()
    for position, token in enumerate(tokens):
        if position >= MAX_TOKENS:
            state = state.fail(TooManyArguments())
            continue
        state = step(state, token)

    if state.url is None:
        state = state.fail(MissingUrl())

    intent = ClassifiedIntent(
        url=state.url,
        output=state.output,
        force=state.force,
        media=state.media,
        errors=state.errors,
    )
    log.debug(f"Classified {tokens!r} as {intent!r}")
    return intent


def select_action(tokens: Sequence[str]) -> Action:
    """Picks the action from the leading token; no tokens means help."""
    if not tokens:
        return Action.HELP
    return SHORT_CIRCUITS.get(tokens[0], Action.DOWNLOAD)
