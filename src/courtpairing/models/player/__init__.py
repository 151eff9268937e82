from courtpairing.models.player.player import Player

__all__ = ["Player"]
