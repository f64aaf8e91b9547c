from buzzer.models import Room


def assign_team(room: Room) -> int:
    """Return the least-loaded team number, lowest number on ties.

    Players whose team falls outside 1..team_count are ignored.
    """
    counts = [0] * room.team_count
    for p in room.players:
        if 1 <= p.team <= room.team_count:
            counts[p.team - 1] += 1
    return counts.index(min(counts)) + 1
