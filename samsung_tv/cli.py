#!/usr/bin/env python3
"""Command-line interface for Samsung TV control."""

import argparse
import logging
import sys
import threading
import time
from typing import Dict, List, Optional, Tuple

from .apps import TVAppManager
from .commander import TVCommander, TVCommanderListener
from .config import (
    DEVICE_INFO_PATH,
    HTTP_PORT,
    add_tv,
    get_config,
    get_default_tv,
    get_storage,
    get_tv_config,
    list_tvs,
    load_config,
    reload_config,
    resolve_tv_id,
    set_default_tv,
)
from .config.constants import DEFAULT_TV_TYPE, HTTP_SCHEME
from .errors import (
    KeyboardCharNotFound,
    TVAppManagerError,
    TVCommanderError,
    TVFetcherError,
)
from .fetcher import TVFetcher
from .keyboard import LAYOUTS
from .keys import ALL_KEYS, KEY_NAME_MAP, ControlKey, get_key
from .models import APPS, TV, AuthStatus, TVApp, TVWakeOnLANDevice
from .search import TVSearcher, TVSearchObserver
from .wol import wake_on_lan

_LOGGER = logging.getLogger(__name__)


class _CommandSession(TVCommanderListener):
    """Tracks one CLI connection and persists tokens the TV issues."""

    def __init__(self):
        self.authorized = threading.Event()
        self.finished = threading.Event()
        self.status = AuthStatus.NONE

    def on_auth_status(self, commander, status):
        self.status = status
        if status == AuthStatus.ALLOWED:
            self.authorized.set()
        elif status == AuthStatus.DENIED:
            self.finished.set()

    def on_token_update(self, commander, token):
        config = commander.config
        get_storage().save_token(token, tv_id=config.tv_id, host=config.host, app_name=config.app)

    def on_disconnect(self, commander):
        self.finished.set()

    def on_error(self, commander, error):
        if isinstance(error, KeyboardCharNotFound):
            print(f"Character not on keyboard: {error.char!r}", file=sys.stderr)
        else:
            print(f"Error: {error}", file=sys.stderr)


def resolve_target(args) -> Tuple[Optional[str], Optional[str], Dict]:
    """Resolve host, TV id and TV config from --ip / --tv / default TV.

    Returns:
        Tuple of (host, tv_id, tv_config)

    Raises:
        ValueError: If no TV can be resolved
    """
    ip = getattr(args, 'ip', None)
    if ip:
        return ip, None, {}

    tv_arg = getattr(args, 'tv', None)
    tv_config = get_tv_config(tv_arg) if tv_arg else get_default_tv()

    if not tv_config:
        if tv_arg:
            raise ValueError(f"TV '{tv_arg}' not found. Use 'samsungtv config list' to see available TVs.")
        raise ValueError("No default TV configured. Use 'samsungtv config add <ip>' to add a TV.")

    host = tv_config.get("host")
    if not host:
        raise ValueError(f"TV '{tv_arg or 'default'}' has no host configured.")

    tv_id = resolve_tv_id(tv_arg) if tv_arg else _default_tv_id()
    return host, tv_id, tv_config


def _default_tv_id() -> Optional[str]:
    config = get_config()
    default = config.get("default_tv")
    if default:
        return resolve_tv_id(default)
    return next(iter(config.get("tvs", {})), None)


def create_commander(args) -> TVCommander:
    """Create a TV commander with config settings and the stored token."""
    host, tv_id, tv_config = resolve_target(args)
    app_name = getattr(args, 'app_name', None) or tv_config.get("app_name") or get_config().get("app_name")
    token = get_storage().get_token(tv_id, host)
    if token:
        _LOGGER.debug("Using stored token for %s", tv_id or host)
    return TVCommander.create(host, app_name, token=token, tv_id=tv_id)


def run_session(args, send) -> int:
    """Connect, wait for authorization, run ``send`` and wait for delivery.

    Args:
        args: Parsed CLI arguments
        send: Callable taking the connected commander

    Returns:
        Process exit code
    """
    try:
        commander = create_commander(args)
    except (ValueError, TVCommanderError) as e:
        print(str(e) or type(e).__name__, file=sys.stderr)
        return 1

    session = _CommandSession()
    commander.add_listener(session)

    print(f"Connecting to {commander.config.host}... (accept the prompt on the TV if shown)")
    commander.connect()

    deadline = time.time() + args.timeout
    while not session.authorized.is_set() and not session.finished.is_set():
        if time.time() > deadline:
            break
        session.authorized.wait(0.1)

    if not session.authorized.is_set():
        if session.status == AuthStatus.DENIED:
            print("Access denied on the TV.", file=sys.stderr)
        else:
            print("Failed to connect to TV", file=sys.stderr)
        commander.disconnect()
        return 1

    send(commander)

    while commander.pending_commands and time.time() < deadline:
        time.sleep(0.05)

    commander.disconnect()
    session.finished.wait(2)
    return 0


def cmd_key(args):
    """Send one or more key presses."""
    keys: List[ControlKey] = []
    for name in args.keys:
        try:
            keys.append(get_key(name))
        except KeyError:
            matches = [k for k in KEY_NAME_MAP if name.lower() in k]
            if matches:
                print(f"Unknown key '{name}'. Did you mean: {', '.join(matches)}", file=sys.stderr)
            else:
                print(f"Unknown key '{name}'. Use 'samsungtv keys' to list available keys.", file=sys.stderr)
            return 1

    def send(commander):
        for key in keys:
            commander.send_remote_command(key)
            print(f"Sent: {key.value}")

    return run_session(args, send)


def cmd_keys(args):
    """List available keys."""
    print("Available keys:")
    print()

    categories = {
        "Power": [ControlKey.POWER_OFF],
        "Navigation": [ControlKey.UP, ControlKey.DOWN, ControlKey.LEFT, ControlKey.RIGHT, ControlKey.ENTER, ControlKey.RETURN],
        "Menu": [ControlKey.MENU, ControlKey.GUIDE, ControlKey.TOOLS, ControlKey.INFO, ControlKey.CONTENTS, ControlKey.CHANNEL_LIST],
        "Volume": [ControlKey.VOLUME_UP, ControlKey.VOLUME_DOWN, ControlKey.MUTE],
        "Numbers": [getattr(ControlKey, f"NUMBER_{i}") for i in range(10)],
        "Colors": [ControlKey.RED, ControlKey.GREEN, ControlKey.YELLOW, ControlKey.BLUE],
        "Sources": [ControlKey.SOURCE, ControlKey.SOURCE_TV, ControlKey.SOURCE_HDMI],
    }

    names_by_key: Dict[ControlKey, List[str]] = {}
    for name, key in KEY_NAME_MAP.items():
        names_by_key.setdefault(key, []).append(name)

    for cat, keys in categories.items():
        print(f"  {cat}:")
        for k in keys:
            names = ", ".join(names_by_key.get(k, []))
            print(f"    {names:30} ({k.value})")

    shown = set(k for keys in categories.values() for k in keys)
    others = [k for k in ALL_KEYS if k not in shown]
    if others:
        print("  Other:")
        for k in others:
            names = ", ".join(names_by_key.get(k, []))
            print(f"    {names:30} ({k.value})")
    return 0


def cmd_text(args):
    """Type text on the TV's on-screen keyboard."""
    layout_name = args.layout or get_config().get("options", {}).get("keyboard_layout", "qwerty")
    layout = LAYOUTS.get(layout_name)
    if layout is None:
        print(f"Unknown keyboard layout '{layout_name}'", file=sys.stderr)
        return 1

    def send(commander):
        commander.enter_text(args.text, layout)
        print(f"Typing: {args.text}")

    return run_session(args, send)


class _DiscoveryPrinter(TVSearchObserver):
    """Prints TVs as they are found."""

    def __init__(self):
        self.found: Dict[str, TV] = {}

    def on_tv_found(self, tv):
        self.found[tv.id] = tv
        print(f"  {tv.ip_address or tv.uri}")
        print(f"    Name: {tv.name}")
        print(f"    ID:   {tv.id}")
        if tv.device is not None:
            print(f"    Model: {tv.device.model_name}")
            print(f"    MAC:   {tv.device.wifi_mac}")
        print()

    def on_tv_lost(self, tv):
        self.found.pop(tv.id, None)


def cmd_discover(args):
    """Discover Samsung TVs on the network."""
    print(f"Scanning for Samsung TVs ({args.duration}s)...\n")

    printer = _DiscoveryPrinter()
    searcher = TVSearcher()
    searcher.add_search_observer(printer)
    searcher.configure_target_tv_id(args.target)
    searcher.start_search()
    try:
        time.sleep(args.duration)
    except KeyboardInterrupt:
        pass
    finally:
        searcher.stop_search()

    if not printer.found:
        print("No TVs found.")
        print("\nTips:")
        print("  - Make sure the TV is powered on")
        print("  - Ensure TV and computer are on the same network")
        print("  - Try a longer search: samsungtv discover --duration 20")
        return 1

    print(f"Found {len(printer.found)} TV(s).")
    print("To add a TV: samsungtv config add <IP> --id <ID>")
    return 0


def cmd_info(args):
    """Show device information reported by the TV."""
    try:
        host, tv_id, _ = resolve_target(args)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    tv = TV(
        id=tv_id or host,
        name=host,
        type=DEFAULT_TV_TYPE,
        uri=f"{HTTP_SCHEME}://{host}:{HTTP_PORT}{DEVICE_INFO_PATH}",
    )
    try:
        tv = TVFetcher(timeout=args.timeout).fetch_device(tv)
    except TVFetcherError as e:
        print(f"Could not fetch device info: {e}", file=sys.stderr)
        return 1

    print(f"Name:    {tv.name}")
    print(f"ID:      {tv.id}")
    print(f"Type:    {tv.type}")
    if tv.version:
        print(f"Version: {tv.version}")
    if tv.device is not None:
        for key, value in tv.device.to_dict().items():
            print(f"  {key}: {value}")
    return 0


def _find_app(name: str) -> Optional[TVApp]:
    app = APPS.get(name.lower())
    if app is not None:
        return app
    for candidate in APPS.values():
        if candidate.id == name or candidate.name.lower() == name.lower():
            return candidate
    return None


def cmd_app(args):
    """List, query or launch apps."""
    if args.action == "list":
        print("Known apps:")
        for key, app in APPS.items():
            print(f"  {key:12} {app.name:14} ({app.id})")
        return 0

    if not args.name:
        print(f"Please provide an app name: samsungtv app {args.action} netflix", file=sys.stderr)
        return 1
    app = _find_app(args.name)
    if app is None:
        print(f"Unknown app '{args.name}'. Use 'samsungtv app list' to see known apps.", file=sys.stderr)
        return 1

    try:
        host, _, _ = resolve_target(args)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    manager = TVAppManager(timeout=args.timeout)
    try:
        if args.action == "status":
            status = manager.fetch_status(app, host)
            print(f"{status.name} ({status.id})")
            print(f"  Running: {status.running}")
            print(f"  Visible: {status.visible}")
            print(f"  Version: {status.version}")
        else:
            manager.launch(app, host)
            print(f"Launching: {app.name}")
    except TVAppManagerError as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1
    return 0


def cmd_wake(args):
    """Wake TV using Wake-on-LAN."""
    mac = args.mac
    if not mac:
        try:
            _, _, tv_config = resolve_target(args)
        except ValueError:
            tv_config = {}
        mac = tv_config.get("mac")

    if not mac:
        print("No MAC address specified.", file=sys.stderr)
        print("Use: samsungtv wake --mac AA:BB:CC:DD:EE:FF", file=sys.stderr)
        print("Or set 'mac' for the TV in config.yaml", file=sys.stderr)
        return 1

    device = TVWakeOnLANDevice(mac=mac)
    if args.broadcast:
        device.broadcast = args.broadcast

    print(f"Sending Wake-on-LAN to {mac}...")
    error = wake_on_lan(device)
    if error is not None:
        print(f"Failed to send wake packet: {error}", file=sys.stderr)
        return 1
    print("Magic packet sent!")
    return 0


def cmd_config(args):
    """View or set configuration."""
    if args.action == "show":
        config = load_config()
        tvs = list_tvs()

        print(f"App name: {config.get('app_name')}")
        print(f"Loaded from: {config.get('_loaded_from') or '(defaults)'}")

        if not tvs:
            print("No TVs configured. Use 'samsungtv config add <ip>' to add a TV.")
            return 0

        print("Configured TVs:")
        for tv in tvs:
            is_default = " (default)" if tv["is_default"] else ""
            alias = tv.get("alias")
            alias_str = f" [{alias}]" if alias else ""
            name = tv.get("name")
            name_str = f" - {name}" if name else ""
            print(f"\n  {tv['tv_id']}{alias_str}{is_default}{name_str}")
            print(f"    Host:  {tv.get('host') or '(not set)'}")
            print(f"    Port:  {tv.get('port')}")
            if tv.get("mac"):
                print(f"    MAC:   {tv['mac']}")

    elif args.action == "list":
        tvs = list_tvs()
        if not tvs:
            print("No TVs configured.")
            return 0
        print("Configured TVs:")
        for tv in tvs:
            alias = tv.get("alias")
            alias_str = f" ({alias})" if alias else ""
            print(f"  {tv['tv_id']}{alias_str}")

    elif args.action == "add":
        if not args.value:
            print("Please provide IP address: samsungtv config add 192.168.1.100", file=sys.stderr)
            return 1
        ip = args.value
        extra = {}
        if args.mac:
            extra["mac"] = args.mac
        if not add_tv(args.id or ip, ip, alias=args.alias, **extra):
            print("Failed to save config", file=sys.stderr)
            return 1
        print(f"Added TV at {ip}")
        if args.alias:
            print(f"  Alias: {args.alias}")

    elif args.action == "set-default":
        if not args.value:
            print("Please provide TV ID or alias: samsungtv config set-default living_room", file=sys.stderr)
            return 1
        if not set_default_tv(args.value):
            print(f"TV not found: {args.value}", file=sys.stderr)
            return 1
        print(f"Default TV set to: {args.value}")

    return 0


def cmd_token(args):
    """View or clear stored tokens."""
    storage = get_storage()

    if args.action == "show":
        devices = storage.list_devices()
        if not devices:
            print("No stored tokens. Connect to a TV and accept the prompt to get one.")
            return 0
        print("Stored tokens:")
        for device in devices:
            name = f" - {device['name']}" if device.get("name") else ""
            print(f"  {device['tv_id']}{name}")
            if device.get("host"):
                print(f"    Host: {device['host']}")
            if device.get("app_name"):
                print(f"    App:  {device['app_name']}")

    elif args.action == "clear":
        try:
            host, tv_id, _ = resolve_target(args)
        except ValueError as e:
            print(str(e), file=sys.stderr)
            return 1
        if storage.delete_token(tv_id, host):
            print("Stored token cleared.")
        else:
            print("No stored token for this TV.")

    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="samsungtv",
        description="Control your Samsung TV from the command line",
    )
    parser.add_argument("--tv", help="TV ID or alias (uses default TV if not specified)")
    parser.add_argument("--ip", help="TV IP address (overrides --tv and config)")
    parser.add_argument("--app-name", help="App name shown in the TV's authorization prompt")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--timeout", "-t", type=float, default=30.0,
                        help="Seconds to wait for the TV (default: 30)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Key
    p_key = subparsers.add_parser("key", help="Send key presses")
    p_key.add_argument("keys", nargs="+", help="Key names (e.g., up, enter, volup, KEY_MUTE)")
    p_key.set_defaults(func=cmd_key)

    # Keys list
    p_keys = subparsers.add_parser("keys", help="List available keys")
    p_keys.set_defaults(func=cmd_keys)

    # Text entry
    p_text = subparsers.add_parser("text", help="Type text on the on-screen keyboard")
    p_text.add_argument("text", help="Text to type")
    p_text.add_argument("--layout", "-l", choices=sorted(LAYOUTS), help="Keyboard layout")
    p_text.set_defaults(func=cmd_text)

    # Discovery
    p_discover = subparsers.add_parser("discover", aliases=["scan"], help="Discover TVs on the network")
    p_discover.add_argument("--target", help="Stop once the TV with this ID is found")
    p_discover.add_argument("--duration", "-d", type=float, default=10.0, help="Search duration in seconds")
    p_discover.set_defaults(func=cmd_discover)

    # Device info
    p_info = subparsers.add_parser("info", help="Show device information")
    p_info.set_defaults(func=cmd_info)

    # Apps
    p_app = subparsers.add_parser("app", help="List, query or launch apps")
    p_app.add_argument("action", choices=["status", "launch", "list"], help="App action")
    p_app.add_argument("name", nargs="?", help="App name or ID (e.g., netflix, youtube)")
    p_app.set_defaults(func=cmd_app)

    # Wake-on-LAN
    p_wake = subparsers.add_parser("wake", help="Wake TV using Wake-on-LAN")
    p_wake.add_argument("--mac", help="TV MAC address (e.g., AA:BB:CC:DD:EE:FF)")
    p_wake.add_argument("--broadcast", help="Broadcast address (default: 255.255.255.255)")
    p_wake.set_defaults(func=cmd_wake)

    # Config
    p_cfg = subparsers.add_parser("config", help="View or set configuration")
    p_cfg.add_argument(
        "action",
        choices=["show", "list", "add", "set-default"],
        nargs="?",
        default="show",
        help="show: display all TVs, list: list TV IDs, add: add new TV, set-default: set default TV"
    )
    p_cfg.add_argument("value", nargs="?", help="Value to set")
    p_cfg.add_argument("--alias", help="Alias when adding a TV")
    p_cfg.add_argument("--id", help="TV ID when adding a TV (defaults to the IP)")
    p_cfg.add_argument("--mac", help="MAC address when adding a TV")
    p_cfg.set_defaults(func=cmd_config)

    # Tokens
    p_token = subparsers.add_parser("token", help="Manage stored tokens")
    p_token.add_argument(
        "action",
        choices=["show", "clear"],
        nargs="?",
        default="show",
        help="show: list stored tokens, clear: remove the token for the TV"
    )
    p_token.set_defaults(func=cmd_token)

    args = parser.parse_args()

    config = reload_config(args.config)
    log_level = "DEBUG" if args.debug else config.get("options", {}).get("log_level", "INFO")
    logging.basicConfig(
        level=getattr(logging, str(log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
