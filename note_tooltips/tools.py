"""
MCP Tools module for Note Tooltips.

Contains the MCP tool handlers (list_tools and call_tool) and the vault
context served by this process.
"""

import json
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.types import (
    Resource,
    TextContent,
    Tool,
)

from .config import settings
from .context import VaultContext
from .models import MatchResult
from .utils import PreconditionError

# Initialize server
server = Server("note-tooltips")

# Vault context served by this process
vault_context = VaultContext(settings)


def _text(output: str) -> list[TextContent]:
    return [TextContent(type="text", text=output)]


async def format_match(match: MatchResult) -> str:
    """Render a match the way the hover card shows it."""
    record = vault_context.index.notes.get(match.relative_path)
    title = record.title if record else Path(match.relative_path).stem

    output = f"**{title}**\n\n"
    output += f"📁 `{match.relative_path}`\n"
    if record and record.aliases:
        output += f"🏷️ {', '.join(record.aliases)}\n"
    if match.matched_alias:
        output += f"Matched alias: {match.matched_alias}\n"
    output += f"\n[🔗 Open in Obsidian]({match.link_target})"

    preview = await vault_context.preview(match)
    if preview:
        output += f"\n\n```\n{preview}\n```"
    return output


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="note_resolve",
            description="Find the note whose title or alias matches a word. Pass either a word, "
                       "or a line of text and the cursor offset within it.",
            inputSchema={
                "type": "object",
                "properties": {
                    "word": {
                        "type": "string",
                        "description": "Word to resolve"
                    },
                    "text": {
                        "type": "string",
                        "description": "Line of text containing the cursor (used when word is not given)"
                    },
                    "offset": {
                        "type": "integer",
                        "description": "Cursor offset within text",
                        "default": 0
                    }
                }
            }
        ),
        Tool(
            name="note_refresh",
            description="Update notes information for the connected vault. Skips the scan when nothing "
                       "changed since the last update unless force is set.",
            inputSchema={
                "type": "object",
                "properties": {
                    "force": {
                        "type": "boolean",
                        "description": "Rebuild even if the vault is unchanged (default: false)",
                        "default": False
                    }
                }
            }
        ),
        Tool(
            name="note_is_stale",
            description="Check whether notes changed since the index was last built.",
            inputSchema={
                "type": "object",
                "properties": {}
            }
        ),
        Tool(
            name="note_list_directories",
            description="List directory choices for the connected vault, with the current selection.",
            inputSchema={
                "type": "object",
                "properties": {}
            }
        ),
        Tool(
            name="note_set_directories",
            description="Select which top-level directories are indexed. Use 'Notes In Root' for notes "
                       "directly in the vault root and 'All' for every directory.",
            inputSchema={
                "type": "object",
                "properties": {
                    "directories": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Directory names to include (at least one)"
                    }
                },
                "required": ["directories"]
            }
        ),
        Tool(
            name="note_connect",
            description="Connect an Obsidian vault directory and index it.",
            inputSchema={
                "type": "object",
                "properties": {
                    "vault_path": {
                        "type": "string",
                        "description": "Path to the vault directory"
                    }
                },
                "required": ["vault_path"]
            }
        ),
        Tool(
            name="note_disconnect",
            description="Disconnect the current vault and clear the notes index.",
            inputSchema={
                "type": "object",
                "properties": {}
            }
        ),
    ]


async def _dispatch(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    if name == "note_resolve":
        word = arguments.get("word")
        if word:
            match = vault_context.resolve(word)
        else:
            text = arguments.get("text", "")
            match = vault_context.resolve_at(text, arguments.get("offset", 0))
            word = text

        if not match:
            return _text(f"No note found for: '{word}'")
        return _text(await format_match(match))

    elif name == "note_refresh":
        force = arguments.get("force", False)
        result = await vault_context.refresh(force=force)

        if not result.refreshed:
            return _text(f"Notes are up to date ({result.note_count} notes)")
        return _text(f"Updated information for {result.note_count} notes")

    elif name == "note_is_stale":
        stale = await vault_context.is_stale()
        if stale:
            return _text("Vault has been modified since the last update")
        return _text("Notes are up to date")

    elif name == "note_list_directories":
        choices = await vault_context.list_directories()
        selected = vault_context.directory_filter.selected

        output = f"Directories in {vault_context.vault_path.name}:\n\n"
        for choice in choices:
            marker = "x" if choice in selected else " "
            output += f"- [{marker}] {choice}\n"
        return _text(output)

    elif name == "note_set_directories":
        directories = arguments.get("directories", [])
        result = await vault_context.set_directory_filter(directories)

        output = "Directory selection updated successfully\n"
        output += f"**Selected:** {', '.join(vault_context.directory_filter.to_state())}\n"
        output += f"**Notes:** {result.note_count}\n"
        return _text(output)

    elif name == "note_connect":
        vault_path = arguments.get("vault_path", "")
        if not vault_path:
            return _text("Error: vault_path is required")

        result = await vault_context.connect(Path(vault_path).expanduser())
        return _text(f"Connected to vault: {vault_context.vault_path.name} ({result.note_count} notes)")

    elif name == "note_disconnect":
        await vault_context.disconnect()
        return _text("Disconnected from vault")

    return _text(f"Unknown tool: {name}")


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        return await _dispatch(name, arguments)
    except PreconditionError as e:
        return _text(f"Error: {e}")
    except OSError as e:
        return _text(f"Error: Failed to update notes information: {e}")


# ============== Resources ==============

@server.list_resources()
async def list_resources() -> list[Resource]:
    """List available resources."""
    return [
        Resource(
            uri="notes://index",
            name="Notes Index",
            description="Indexed notes with their aliases and link targets",
            mimeType="application/json"
        ),
    ]


@server.read_resource()
async def read_resource(uri: Any) -> str:
    """Read a resource."""
    if str(uri).rstrip("/") == "notes://index":
        index = vault_context.index
        return json.dumps({
            "vault": str(vault_context.vault_path) if vault_context.vault_path else None,
            "built_at": index.built_at,
            "directories": vault_context.directory_filter.to_state(),
            "notes": [record.model_dump(mode="json") for record in index.records()],
        }, indent=2)

    return json.dumps({"error": f"Unknown resource: {uri}"})
