"""Type hints used in Court Pairing."""

from typing import Dict, List, Tuple

PlayerId = str

# player id (or court id) -> games counted
CountMap = Dict[str, int]

# (own points, opposing points) from one side of the net
PointsFor = Tuple[int, int]

# Player ids of one game, serve team first
GamePlayers = List[PlayerId]
