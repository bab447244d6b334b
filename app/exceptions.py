from typing import Iterable, List, Optional

from pydantic import BaseModel


class ProblemDetail(BaseModel):
    """RFC 7807 compliant error response."""

    type: str = "about:blank"
    title: str
    detail: Optional[str] = None
    status: int
    instance: Optional[str] = None
    code: str
    player_ids: Optional[List[str]] = None


class DomainException(Exception):
    """Base class for domain-specific exceptions."""

    def __init__(
        self,
        status_code: int,
        title: str,
        *,
        code: str,
        detail: str | None = None,
        type_: str = "about:blank",
    ) -> None:
        super().__init__(detail or title)
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.type = type_
        self.code = code

    def to_problem(self) -> ProblemDetail:
        return ProblemDetail(
            type=self.type,
            title=self.title,
            detail=self.detail,
            status=self.status_code,
            code=self.code,
        )


class NotFound(DomainException):
    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(
            status_code=404,
            title=f"{kind.capitalize()} not found",
            detail=f"{kind} '{entity_id}' not found",
            code=f"{kind}_not_found",
        )
        self.kind = kind
        self.entity_id = entity_id


class InvalidState(DomainException):
    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=409,
            title="Invalid state",
            detail=detail,
            code="invalid_state",
        )


class PlayerUnavailable(DomainException):
    """Raised when a player is already busy in another ongoing match."""

    def __init__(self, players: Iterable) -> None:
        players = list(players)
        self.player_ids = [p.id for p in players]
        names = ", ".join(f"{p.name} ({p.id})" for p in players)
        super().__init__(
            status_code=409,
            title="Player unavailable",
            detail=f"already playing in an ongoing match: {names}",
            code="player_unavailable",
        )

    def to_problem(self) -> ProblemDetail:
        problem = super().to_problem()
        problem.player_ids = self.player_ids
        return problem


class InvariantViolation(DomainException):
    """Stored match data breaks a structural invariant; never recovered."""

    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=500,
            title="Invariant violation",
            detail=detail,
            code="invariant_violation",
        )
