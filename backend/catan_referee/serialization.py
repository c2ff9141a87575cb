"""
Serialization of coordinates, responses and the queryable session state.
"""
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .board import Board, HexCoordinate, IntersectionCoordinate, PathCoordinate, Tile
from .params import HexParam, IntersectionParam, PathParams
from .player import ExpansionPlayer, Player

if TYPE_CHECKING:
    from .actions.base import Responses
    from .referee import Referee


def encode_hex(coordinate: HexCoordinate) -> Dict[str, int]:
    return {"x": coordinate.x, "y": coordinate.y, "z": coordinate.z}


def parse_hex(data: Dict[str, Any]) -> HexCoordinate:
    return HexParam.model_validate(data).to_coordinate()


def encode_intersection(coordinate: IntersectionCoordinate) -> Dict[str, Dict[str, int]]:
    return {
        "coord1": encode_hex(coordinate.coord1),
        "coord2": encode_hex(coordinate.coord2),
        "coord3": encode_hex(coordinate.coord3),
    }


def parse_intersection(data: Dict[str, Any]) -> IntersectionCoordinate:
    return IntersectionParam.model_validate(data).to_coordinate()


def encode_path(path: PathCoordinate) -> Dict[str, Any]:
    return {"start": encode_intersection(path.start), "end": encode_intersection(path.end)}


def parse_path(data: Dict[str, Any]) -> PathCoordinate:
    return PathParams.model_validate(data).path


def serialize_tile(tile: Tile, board: Board) -> Dict[str, Any]:
    return {
        "hex": encode_hex(tile.coordinate),
        "type": tile.tile_type.value,
        "resource": tile.resource.value if tile.resource else None,
        "number": tile.number,
        "robber": board.robber == tile.coordinate,
    }


def serialize_board(referee: "Referee") -> Dict[str, Any]:
    """Tiles, buildings (with metropolis flags), roads, ports and the robber."""
    board = referee.board
    metropolis = referee.metropolis_cities()
    return {
        "tiles": [serialize_tile(t, board) for t in sorted(board.tiles.values(), key=lambda t: t.coordinate)],
        "buildings": [
            {
                "coordinate": encode_intersection(ic),
                "owner": b.owner,
                "type": b.kind.value,
                "cityWall": b.walled,
                "metropolis": metropolis[ic].value if ic in metropolis else None,
            }
            for ic, b in sorted(board.buildings.items())
        ],
        "roads": [
            {**encode_path(p), "owner": owner}
            for p, owner in sorted(board.roads.items(), key=lambda item: (item[0].start, item[0].end))
        ],
        "ports": [
            {"coordinate": encode_intersection(ic), "resource": kind.value}
            for ic, kind in sorted(board.ports.items())
        ],
        "knights": [
            {
                "coordinate": encode_intersection(k.position),
                "owner": k.owner,
                "level": k.level.strength,
                "active": k.active,
            }
            for p in referee.players_in_order() if isinstance(p, ExpansionPlayer)
            for k in p.knights
        ],
        "robber": encode_hex(board.robber) if board.robber else None,
    }


def serialize_hand(player: Player) -> Dict[str, Any]:
    """Private hand detail, only ever sent to its owner."""
    hand = {
        "cards": player.hand.as_dict(),
        "developmentCards": list(player.development_cards),
        "newDevelopmentCards": list(player.new_development_cards),
    }
    if isinstance(player, ExpansionPlayer):
        hand["progressCards"] = [card.value for card in player.progress_cards]
    return hand


def serialize_player_summary(referee: "Referee", player_id: int) -> Dict[str, Any]:
    player = referee.player(player_id)
    summary = {
        "name": player.name,
        "id": player.id,
        "color": player.color,
        "numSettlements": len(referee.board.settlements_of(player.id)),
        "numCities": len(referee.board.cities_of(player.id)),
        "numRoads": len(referee.board.roads_of(player.id)),
        "numPlayedKnights": player.knights_played,
        "longestRoad": referee.longest_road_holder == player.id,
        "largestArmy": referee.largest_army_holder == player.id,
        "victoryPoints": referee.public_points(player.id),
        "numResourceCards": player.card_count(),
        "numDevelopmentCards": len(player.development_cards) + len(player.new_development_cards),
        "rates": {kind.value: rate for kind, rate in referee.trade_rates(player.id).items()},
    }
    if isinstance(player, ExpansionPlayer):
        summary.update({
            "numKnights": len(player.knights),
            "activeKnightStrength": player.active_strength,
            "defenderPoints": player.defender_points,
            "cityWalls": player.city_walls,
            "cityImprovements": player.improvements.to_dict(),
            "numProgressCards": len(player.progress_cards),
        })
    return summary


def serialize_follow_up(referee: "Referee", player_id: int) -> Optional[Dict[str, Any]]:
    follow_up = referee.next_follow_up(player_id)
    return follow_up.describe() if follow_up is not None else None


def serialize_game_state(referee: "Referee", player_id: int) -> Dict[str, Any]:
    """Everything one player may see between commands."""
    player = referee.player(player_id)
    state = {
        "playerID": player.id,
        "status": referee.status.value,
        "turnOrder": list(referee.turn_order),
        "currentTurn": referee.current_player_id,
        "winner": referee.winner,
        "hand": serialize_hand(player),
        "board": serialize_board(referee),
        "followUp": serialize_follow_up(referee, player.id),
        "players": [serialize_player_summary(referee, pid) for pid in referee.turn_order],
        "settings": referee.settings.to_dict(),
        "merchantOwner": referee.merchant_owner if referee.merchant_owner is not None else -1,
        "merchantHex": encode_hex(referee.merchant_hex) if referee.merchant_hex else None,
    }
    if referee.is_expansion:
        state["barbarianTrack"] = referee.expansion.barbarians.to_dict()
        state["metropolis"] = referee.expansion.metropolis.to_dict()
    return state


def serialize_responses(responses: "Responses") -> Dict[int, Dict[str, Any]]:
    return {pid: response.to_dict() for pid, response in responses.items()}


def serialize_pending(referee: "Referee") -> List[Dict[str, Any]]:
    """Every queued decision, batch by batch."""
    return [
        {"batch": index, "playerId": f.player_id, **f.describe()}
        for index, batch in enumerate(referee.queued_follow_ups())
        for f in batch
    ]
