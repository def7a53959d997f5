#!/usr/bin/env python3
"""
Register or remove the org-outline MCP server in a Claude Desktop config.

Usage:
    install_desktop.py install <config_path> <mcp_name> <uv_path> <root_dir> <server_script>
    install_desktop.py uninstall <config_path> <mcp_name>

ORG_* variables set in the calling shell are copied into the server entry;
ORG_DIR and ORG_JOURNAL_FILE always get a value.
"""
import json
import os
import sys

FORWARDED_ENV = (
    "ORG_DATE_FORMAT",
    "ORG_WORKFLOW_STATES",
    "ORG_HEADING_MARKER_STYLE",
    "ORG_BODY_INDENT",
    "ORG_BACKUP",
    "ORG_AUTO_DONE",
)

USAGE = (
    "Usage: install_desktop.py install <config_path> <mcp_name> "
    "<uv_path> <root_dir> <server_script>\n"
    "       install_desktop.py uninstall <config_path> <mcp_name>"
)


def server_env(environ=None):
    """Environment block for the server entry."""
    environ = os.environ if environ is None else environ
    org_dir = environ.get("ORG_DIR") or os.path.expanduser("~/org")
    env = {
        "ORG_DIR": org_dir,
        "ORG_JOURNAL_FILE": environ.get("ORG_JOURNAL_FILE")
        or os.path.join(org_dir, "journal.org"),
    }
    for name in FORWARDED_ENV:
        if environ.get(name):
            env[name] = environ[name]
    return env


def read_config(config_path):
    if not os.path.exists(config_path):
        return {}
    with open(config_path, "r") as f:
        return json.load(f)


def write_config(config_path, config):
    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)


def install_server(
    config_path, mcp_name, uv_path, root_dir, server_script, environ=None
):
    """Add or replace the server entry. Other servers are left as they are."""
    config = read_config(config_path)
    config.setdefault("mcpServers", {})[mcp_name] = {
        "command": uv_path,
        "args": ["--directory", root_dir, "run", server_script],
        "env": server_env(environ),
    }
    write_config(config_path, config)
    print(f'MCP server "{mcp_name}" installed in {config_path}')


def uninstall_server(config_path, mcp_name):
    """Remove the server entry; returns False when it was not installed."""
    config = read_config(config_path)
    servers = config.get("mcpServers", {})
    if mcp_name not in servers:
        print(f'MCP server "{mcp_name}" is not installed.')
        return False

    del servers[mcp_name]
    write_config(config_path, config)
    print(f'MCP server "{mcp_name}" uninstalled.')
    return True


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    match argv:
        case ["install", config_path, mcp_name, uv_path, root_dir, script]:
            install_server(config_path, mcp_name, uv_path, root_dir, script)
        case ["uninstall", config_path, mcp_name]:
            uninstall_server(config_path, mcp_name)
        case _:
            print(USAGE)
            sys.exit(1)


if __name__ == "__main__":
    main()
