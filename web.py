#!/usr/bin/env python3
"""
Pocket Dice Web — Flask + WebSocket server for browser-based play.

Each WebSocket connection gets its own GameCoordinator instance sharing the
server's key/value store, so the high score survives across games.
State is pushed to the client as JSON snapshots at ~30 FPS.
"""
import argparse
import json
import logging
import threading
import time

from flask import Flask, render_template
from flask_sock import Sock

from frontend_adapter import FrontendAdapter, NullSound
from game_coordinator import GameCoordinator
from storage import JsonFileStore

logger = logging.getLogger(__name__)

TICK_SECONDS = 1 / 30

app = Flask(__name__)
app.config["STORE_PATH"] = None
sock = Sock(app)


@app.route("/")
def index():
    """The hand-held page — connects to WebSocket for real-time play."""
    return render_template("game.html")


@sock.route("/ws")
def websocket(ws):
    """WebSocket handler — one game per connection."""
    coordinator = GameCoordinator(store=JsonFileStore(app.config["STORE_PATH"]))
    adapter = FrontendAdapter(coordinator, sound=NullSound())
    lock = threading.Lock()
    running = True

    def tick_loop():
        """Background thread: tick coordinator and push state at ~30 FPS."""
        nonlocal running
        last = time.monotonic()
        while running:
            try:
                now = time.monotonic()
                with lock:
                    adapter.update((now - last) * 1000)
                    snapshot = adapter.get_game_snapshot()
                last = now
                ws.send(json.dumps(snapshot))
            except Exception:
                logger.error("Tick loop error", exc_info=True)
                running = False
                break
            time.sleep(TICK_SECONDS)

    tick_thread = threading.Thread(target=tick_loop, daemon=True)
    tick_thread.start()

    try:
        while running:
            data = ws.receive()
            if data is None:
                break
            try:
                action = json.loads(data)
            except json.JSONDecodeError:
                logger.warning("Invalid JSON from client: %s", data)
                continue

            with lock:
                _handle_action(adapter, action)
    except Exception:
        logger.error("WebSocket receive error", exc_info=True)
    finally:
        running = False


def _handle_action(adapter, action):
    """Dispatch a client action to the adapter. Returns False if unknown."""
    if not isinstance(action, dict):
        logger.warning("Ignoring malformed action: %r", action)
        return False
    cmd = action.get("action", "")

    if cmd == "roll":
        adapter.press_roll()

    elif cmd == "hold":
        idx = action.get("die_index")
        if isinstance(idx, int) and not isinstance(idx, bool) and 0 <= idx < 5:
            adapter.press_hold(idx)
        else:
            logger.warning("Ignoring hold with bad die_index: %r", idx)
            return False

    elif cmd in ("prev", "next"):
        adapter.press_select(cmd)

    elif cmd == "enter":
        adapter.press_enter()

    elif cmd == "new":
        adapter.press_new()

    elif cmd == "sound":
        adapter.press_sound()

    else:
        logger.warning("Unknown action from client: %r", cmd)
        return False
    return True


def main(argv=None):
    """Entry point for the web server."""
    parser = argparse.ArgumentParser(description="Pocket Dice Web Server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=5000, help="Port (default: 5000)")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    parser.add_argument("--store", metavar="PATH", default=None,
                        help="JSON file for high score and settings (default: ~/.pocket_dice.json)")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="INFO",
                        help="Logging level (default: INFO)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")
    app.config["STORE_PATH"] = args.store
    print(f"Starting Pocket Dice web server at http://{args.host}:{args.port}")
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
