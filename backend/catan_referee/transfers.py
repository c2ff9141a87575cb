"""
Card transfer policies shared by monopoly-style, wedding-style and
theft-style effects.
"""
import random
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from .ledger import CARD_KINDS, Amount, CardKind, Ledger, ResourceType
from .player import Player

T = TypeVar("T")


def capped_transfer(actor: Player, opponents: Sequence[Player], kind: CardKind, cap: Amount) -> Dict[int, Amount]:
    """Each opponent, in session order, gives ``min(held, cap)`` of one kind.

    Returns the amount taken per opponent id; opponents with none are skipped.
    """
    taken: Dict[int, Amount] = {}
    for opponent in opponents:
        amount = min(opponent.hand[kind], cap)
        if amount <= 0:
            continue
        opponent.hand.remove(kind, amount)
        actor.hand.add(kind, amount)
        taken[opponent.id] = amount
    return taken


def threshold_amounts(hand: Ledger, amount: Amount, kinds: Optional[Iterable[CardKind]] = None) -> Dict[CardKind, Amount]:
    """Pick ``amount`` cards from a hand, walking kinds in enumeration order.

    Takes ``min(held, still needed)`` of each kind until satisfied or out of
    kinds. The wildcard is never taken.
    """
    picked: Dict[CardKind, Amount] = {}
    needed = amount
    for kind in (kinds if kinds is not None else hand.kinds()):
        if needed <= 0:
            break
        if kind is ResourceType.WILDCARD:
            continue
        take = min(hand[kind], needed)
        if take > 0:
            picked[kind] = take
            needed -= take
    return picked


def threshold_transfer(
    actor: Player,
    donors: Sequence[Player],
    amount: Amount,
    kinds: Iterable[CardKind] = CARD_KINDS,
) -> Dict[int, Dict[CardKind, Amount]]:
    """Each donor gives ``amount`` cards total to the actor (or all they have).

    Callers choose the donors; the gating comparison (more / at least as many
    victory points) belongs to the card, the spreading rule lives here.
    """
    kinds = list(kinds)
    given: Dict[int, Dict[CardKind, Amount]] = {}
    for donor in donors:
        picked = threshold_amounts(donor.hand, amount, kinds)
        for kind, count in picked.items():
            donor.hand.remove(kind, count)
            actor.hand.add(kind, count)
        if picked:
            given[donor.id] = picked
    return given


def sample_units(rng: random.Random, units: List[T], count: int) -> List[T]:
    """Draw ``count`` individual units uniformly without replacement.

    Returns every unit (in random order) when fewer than ``count`` exist.
    """
    pool = list(units)
    drawn = []
    while pool and len(drawn) < count:
        drawn.append(pool.pop(rng.randrange(len(pool))))
    return drawn


def steal_random_cards(
    rng: random.Random,
    thief: Player,
    victim: Player,
    count: int,
    kinds: Optional[Iterable[CardKind]] = None,
) -> List[CardKind]:
    """Move ``count`` random whole cards from victim to thief, per unit."""
    if kinds is None:
        kinds = [k for k in victim.hand.kinds() if k in thief.hand.counts]
    stolen = sample_units(rng, victim.hand.units(kinds), count)
    for kind in stolen:
        victim.hand.remove(kind, 1)
        thief.hand.add(kind, 1)
    return stolen
