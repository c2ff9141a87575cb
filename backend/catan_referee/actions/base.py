"""
The Action / FollowUpAction protocol.

An Action is an ordinary turn command: it is built for one player (the
constructor fails loudly for an unknown player), then executed against the
referee in one atomic step. A FollowUpAction is a queued decision: it is
built for a player id only, completed later through setup(), then executed.

Effect code signals a rule violation by raising ActionRejected before it
mutates anything; the boundary turns that into a failed response for the
acting player only.
"""
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Optional, Type

from ..errors import ActionRejected, FollowUpNotReadyError, InvalidParameters
from ..params import NoParams, ParamsModel, parse_params

if TYPE_CHECKING:
    from ..referee import Referee


@dataclass
class ActionResponse:
    """What one player is told about one command."""
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "message": self.message, "data": self.data}


Responses = Dict[int, ActionResponse]


@dataclass
class ActionOutcome:
    """Result of a successful effect, before it is fanned out per player."""
    message: str  # for the actor
    public_message: str  # for everyone else
    data: Optional[Dict[str, Any]] = None
    public_data: Optional[Dict[str, Any]] = None
    private: Dict[int, ActionResponse] = field(default_factory=dict)  # per-player overrides


class Action:
    """Base class for ordinary turn actions."""
    kind: ClassVar[str] = ""
    params_model: ClassVar[Type[ParamsModel]] = NoParams
    allowed_before_roll: ClassVar[bool] = False
    requires_expansion: ClassVar[bool] = False

    def __init__(self, referee: "Referee", player_id: int, params: Optional[dict] = None):
        referee.player(player_id)  # raises UnknownPlayerError
        if self.requires_expansion:
            referee.expansion_player(player_id)  # raises ExpansionNotEnabledError
        self.player_id = player_id
        self.params = parse_params(self.params_model, params)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(player_id={self.player_id})"

    def can_run_before_roll(self) -> bool:
        return self.allowed_before_roll

    def authorize(self, referee: "Referee"):
        """Turn, status and pending-decision checks shared by every action."""
        referee.check_ordinary_action(self.player_id, self.can_run_before_roll())

    def apply(self, referee: "Referee") -> ActionOutcome:
        raise NotImplementedError

    def execute(self, referee: "Referee") -> Responses:
        try:
            self.authorize(referee)
            outcome = self.apply(referee)
        except ActionRejected as exc:
            return referee.reject(self.player_id, self.kind, str(exc))
        return referee.complete(self.player_id, self.kind, outcome)


class FollowUpAction:
    """Base class for queued, single-player decisions."""
    kind: ClassVar[str] = ""
    prompt: ClassVar[str] = ""
    params_model: ClassVar[Type[ParamsModel]] = NoParams
    is_dice_roll: ClassVar[bool] = False

    def __init__(self, player_id: int):
        self.player_id = player_id
        self.params: Optional[ParamsModel] = None
        self.ready = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(player_id={self.player_id}, ready={self.ready})"

    def setup(self, referee: "Referee", player_id: int, params: Optional[dict] = None):
        """Supply the deferred decision. Rejects a foreign player or malformed input."""
        referee.player(player_id)
        if player_id != self.player_id:
            raise InvalidParameters(f"This decision belongs to player {self.player_id}, not player {player_id}")
        self.params = parse_params(self.params_model, params)
        self.ready = True

    def describe(self) -> Dict[str, Any]:
        """What the owing player is asked for."""
        return {"actionName": self.kind, "actionData": {"prompt": self.prompt}}

    def apply(self, referee: "Referee") -> ActionOutcome:
        raise NotImplementedError

    def execute(self, referee: "Referee") -> Responses:
        if not self.ready:
            raise FollowUpNotReadyError(f"{type(self).__name__} executed before setup()")
        try:
            if referee.is_finished:
                raise ActionRejected("The game is over")
            if not referee.is_follow_up_pending(self):
                raise ActionRejected("That decision is not currently pending")
            outcome = self.apply(referee)
        except ActionRejected as exc:
            self.ready = False
            return referee.reject(self.player_id, self.kind, str(exc))
        referee.remove_follow_up(self)
        self.after_resolved(referee)
        return referee.complete(self.player_id, self.kind, outcome)

    def after_resolved(self, referee: "Referee"):
        """Hook run once the follow-up has left the queue."""


def charge(referee: "Referee", player, cost, what: str):
    """Deduct a cost and return it to the bank, or reject without touching anything."""
    if not player.hand.can_afford(cost):
        needs = ", ".join(f"{amount} {kind.value}" for kind, amount in cost.items())
        raise ActionRejected(f"Insufficient resources to {what} (needs {needs})")
    player.hand.pay(cost)
    referee.bank.collect(cost)
