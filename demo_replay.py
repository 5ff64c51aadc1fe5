#!/usr/bin/env python3
"""Demo script: play a scripted game, then replay and verify it."""

import json
import sys

from blockfall_core.commands import Command
from blockfall_core.engine import Phase
from blockfall_core.replay import Recorder, Replayer, ReplayResult

# Cycles of column shifts tried before each hard drop
SHIFTS = [-4, -2, 0, 2, 4, -3, 1, 3]
FRAME_MS = 16


def play_scripted(seed: int, max_pieces: int) -> Recorder:
    """Drop pieces across the board until max_pieces lock or the game ends."""
    recorder = Recorder(seed)
    recorder.command(Command.START)

    for i in range(max_pieces):
        snapshot = recorder.engine.snapshot()
        if snapshot.phase != Phase.PLAYING:
            break
        shift = SHIFTS[i % len(SHIFTS)]
        step = Command.MOVE_RIGHT if shift > 0 else Command.MOVE_LEFT
        if i % 3 == 0:
            recorder.command(Command.ROTATE_CW)
        for _ in range(abs(shift)):
            recorder.command(step)
        recorder.tick(FRAME_MS)
        recorder.command(Command.HARD_DROP)

    recorder.finish()
    return recorder


def main():
    """Run the replay demo."""
    print("Blockfall Replay Demo")
    print("=" * 60)

    seed = int(sys.argv[2]) if len(sys.argv) > 2 else 42
    recorder = play_scripted(seed, max_pieces=200)
    expected = ReplayResult.from_snapshot(seed, recorder.engine.snapshot())
    print(f"Played: {json.dumps(expected.to_dict())}")

    if len(sys.argv) > 1 and sys.argv[1] == "dump":
        print(json.dumps(recorder.log.to_dict(), indent=2))
        return

    replayer = Replayer(verbose=True)
    ok = replayer.verify(recorder.log, expected)
    print(f"Replay matches: {ok}")

    print("\nTry these commands:")
    print("  python demo_replay.py dump [seed]    - Print the recorded input log")


if __name__ == "__main__":
    main()
