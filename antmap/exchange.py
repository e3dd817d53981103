"""Wire format for map exchange between ants.

A message is the sender's logical tick as a big-endian int32 followed by
BeliefMap.serialize() output.
"""

import struct

import numpy as np

from .world.belief_map import BeliefMap, MapFormatError

_TICK = struct.Struct(">i")

# Ticks and last-seen stamps are int32 on the wire and in the map. A peer may
# not hand us a clock so late that our own ticks would run out of room.
MAX_PEER_TICK = 2 ** 30


def encode_message(tick: int, belief: BeliefMap) -> bytes:
    """Pack a tick and a map for sending to another ant."""
    return _TICK.pack(tick) + belief.serialize()


def decode_message(data: bytes, food_decay_ticks: int = 50,
                   occupancy_decay_ticks: int = 5) -> tuple[int, BeliefMap]:
    """
    Unpack a message from encode_message().

    Returns:
        (sender tick, sender map)

    Raises:
        MapFormatError: the payload is truncated or malformed, the sender
        tick is negative or past MAX_PEER_TICK, or the map has cells seen
        after the sender tick. Nothing is returned in that case, so a
        half-read map never reaches the caller.
    """
    if data is None:
        raise MapFormatError("no payload")
    if len(data) < _TICK.size:
        raise MapFormatError(f"message needs at least {_TICK.size} bytes, got {len(data)}")
    (tick,) = _TICK.unpack_from(data)
    if tick < 0:
        raise MapFormatError(f"negative sender tick {tick}")
    if tick > MAX_PEER_TICK:
        raise MapFormatError(f"sender tick {tick} exceeds {MAX_PEER_TICK}")
    belief = BeliefMap.deserialize(
        data[_TICK.size:],
        food_decay_ticks=food_decay_ticks,
        occupancy_decay_ticks=occupancy_decay_ticks,
    )
    if np.any(belief.seen > tick):
        raise MapFormatError(f"map has cells seen after sender tick {tick}")
    return tick, belief
