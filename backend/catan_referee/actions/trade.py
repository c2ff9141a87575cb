"""
Trading with the bank.
"""
from typing import TYPE_CHECKING

from ..errors import ActionRejected
from ..params import BankTradeParams
from .base import Action, ActionOutcome
from .registry import ActionRegistry

if TYPE_CHECKING:
    from ..referee import Referee


@ActionRegistry.register
class TradeWithBank(Action):
    """Exchange cards with the bank at the player's current rates."""
    kind = "tradeWithBank"
    params_model = BankTradeParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.player(self.player_id)
        offer, request = self.params.offer, self.params.request
        rates = referee.trade_rates(player.id)

        credits = 0
        for kind, amount in offer.items():
            if kind not in rates:
                raise ActionRejected(f"You cannot trade {kind.value}")
            rate = rates[kind]
            if amount != int(amount) or int(amount) % rate != 0:
                raise ActionRejected(f"{kind.value} trades at {rate}:1; offer a multiple of {rate}")
            credits += int(amount) // rate
        for kind, amount in request.items():
            if kind not in player.hand.counts:
                raise ActionRejected(f"You cannot receive {kind.value}")
            if kind in offer:
                raise ActionRejected(f"You cannot both offer and request {kind.value}")
            if amount != int(amount):
                raise ActionRejected("Only whole cards can be requested")
        if credits != sum(request.values()):
            raise ActionRejected(f"Your offer is worth {credits} cards, not {int(sum(request.values()))}")
        if not player.hand.can_afford(offer):
            raise ActionRejected("You do not hold the cards you offered")
        for kind, amount in request.items():
            if not referee.bank.can_supply(kind, amount):
                raise ActionRejected(f"The bank has run out of {kind.value}")

        player.hand.pay(offer)
        referee.bank.collect(offer)
        for kind, amount in request.items():
            referee.bank.take(kind, amount)
            player.hand.add(kind, amount)
        gave = {k.value: v for k, v in offer.items()}
        got = {k.value: v for k, v in request.items()}
        return ActionOutcome(
            f"Traded {gave} for {got}",
            f"Player {player.id} traded {gave} with the bank for {got}",
            data={"offer": gave, "request": got},
            public_data={"offer": gave, "request": got},
        )
