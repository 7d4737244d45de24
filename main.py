#!/usr/bin/env python

import argparse
import sys
import threading
from config import INVENTORY_URL, LOG_FILE, LOG_LEVEL, __version__
from eliot import log_message, start_action, write_traceback
from tapedeck.errors import InventoryError
from tapedeck.inventory import InventoryClient, filter_tracks
from tapedeck.logging import app_logger, setup_logging
from tapedeck.models import PlaybackState, RepeatMode
from tapedeck.orchestrator import PlaybackOrchestrator


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="tapedeck", description="Play the tracks of a tapedeck inventory service.")
    parser.add_argument('--server', default=INVENTORY_URL, help="inventory service base URL")
    parser.add_argument('--search', default="", help="only queue tracks whose title contains this text")
    parser.add_argument('--shuffle', action='store_true', help="start with shuffle enabled")
    parser.add_argument('--repeat', choices=[mode.value for mode in RepeatMode], default=RepeatMode.NONE.value)
    parser.add_argument('--sleep', type=int, default=0, metavar="MINUTES", help="arm the sleep timer (a configured option)")
    parser.add_argument('--volume', type=float, default=None, help="initial volume, 0.0-1.0")
    parser.add_argument('--log-level', default=LOG_LEVEL)
    parser.add_argument('--log-file', default=LOG_FILE)
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def configure(player: PlaybackOrchestrator, args) -> None:
    """Apply command-line modes to a fresh orchestrator."""
    if args.shuffle:
        player.toggle_shuffle()
    while player.repeat_mode.value != args.repeat:
        player.toggle_repeat()
    if args.volume is not None:
        player.set_volume(args.volume)
    if args.sleep:
        if args.sleep not in player.sleep_timer.options:
            raise ValueError(f"--sleep must be one of {player.sleep_timer.options[1:]}")
        while player.sleep_state.selected_minutes != args.sleep:
            player.toggle_sleep_timer()


def build_engine():
    """Create the libvlc engine; libvlc is only loaded once there is something to play."""
    from tapedeck.vlc_engine import VlcEngine

    return VlcEngine()


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    with start_action(app_logger, "application_startup"):
        try:
            client = InventoryClient(args.server)
            tracks = filter_tracks(client.list_tracks(), args.search)
            log_message(message_type="application_init", message=f"Loaded {len(tracks)} tracks from {args.server}")
            if not tracks:
                log_message(message_type="application_exit", message="Nothing to play")
                return 0

            engine = build_engine()
            player = PlaybackOrchestrator(engine=engine)
            configure(player, args)
            player.set_queue(tracks)

            finished = threading.Event()
            load_errors = []

            def on_load_error(track, reason):
                load_errors.append(reason)
                log_message(message_type="application_exit", message=f"Cannot play {track.title if track else 'track'}: {reason}")
                finished.set()

            player.state_change_listener = lambda p: finished.set() if p.playback_state is PlaybackState.STOPPED else None
            player.load_error_listener = on_load_error

            first = tracks[0]
            if player.shuffle_enabled:
                first = tracks[player.sampler.rng.randrange(len(tracks))]
            player.play_track(first)
            log_message(message_type="application_ready", message="Playback started, Ctrl-C to quit")

        except (InventoryError, ValueError) as e:
            write_traceback()
            log_message(message_type="error_occurred", error_message=str(e), error_type=type(e).__name__, context="application_startup")
            return 1

    try:
        finished.wait()
    except KeyboardInterrupt:
        log_message(message_type="application_exit", message="Interrupted")
    finally:
        player.close()
        engine.close()
    return 1 if load_errors else 0


if __name__ == "__main__":
    sys.exit(main())
