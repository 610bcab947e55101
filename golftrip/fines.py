from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional


@dataclass(frozen=True)
class FineType:
    type: str
    name: str
    amount: int
    description: str


FINE_CATALOG = (
    FineType("three-putt", "Three Putt", 1, "Three putts or more on a green"),
    FineType("water", "Water Ball", 1, "Ball found the water"),
    FineType("bunker-fail", "Bunker Fail", 1, "Took more than one shot to get out of a bunker"),
    FineType("air-shot", "Air Shot", 2, "Swung and missed the ball completely"),
    FineType("out-of-bounds", "Out of Bounds", 1, "Ball hit out of bounds"),
    FineType("lost-ball", "Lost Ball", 1, "Ball lost and not found within three minutes"),
    FineType("wrong-ball", "Wrong Ball", 2, "Played somebody else's ball"),
    FineType("ladies-tee", "Ladies Tee", 2, "Drive failed to pass the ladies tee"),
    FineType("late", "Late on Tee", 5, "Late for the tee time"),
    FineType("club-throw", "Club Throw", 5, "Threw a club in anger"),
)

_CATALOG_BY_TYPE = {f.type: f for f in FINE_CATALOG}


def get_fine_type(fine_type: str) -> Optional[FineType]:
    return _CATALOG_BY_TYPE.get(fine_type)


def summarize_fines(fines: Iterable, player_names: Dict[int, str]) -> dict:
    """
    fines: objects with .player_id, .type and .amount
    player_names: {player_id: display name}
    """
    per_player = defaultdict(int)
    per_type = defaultdict(int)
    total = 0

    for f in fines:
        total += f.amount
        per_player[f.player_id] += f.amount
        per_type[f.type] += 1

    players: List[dict] = [
        {
            "player_id": pid,
            "name": player_names.get(pid, "Unknown player"),
            "total": amount,
        }
        for pid, amount in per_player.items()
        if amount > 0
    ]
    players.sort(key=lambda row: (-row["total"], row["name"]))

    most_common = None
    if per_type:
        # ties go to the catalog order, unknown types last
        order = {f.type: i for i, f in enumerate(FINE_CATALOG)}
        most_common = min(per_type, key=lambda t: (-per_type[t], order.get(t, len(order)), t))

    return {
        "total": total,
        "count": sum(per_type.values()),
        "players": players,
        "most_fined": players[0] if players else None,
        "most_common_type": most_common,
    }
