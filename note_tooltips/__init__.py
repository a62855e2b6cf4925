# Note Tooltips
#
# Modular package structure:
# - config.py: Settings and directory selection sentinels
# - logging.py: structlog configuration
# - models.py: Pydantic models for notes, index snapshots and matches
# - utils.py: Link targets, normalization, word lookup and exceptions
# - frontmatter.py: Alias and preview extraction from front matter
# - scanner.py: Vault traversal
# - filters.py: Directory selection filter
# - builder.py: Index building
# - staleness.py: Vault modification checks
# - cache.py: IndexCache class for the persisted index
# - state.py: Persisted connected vault and directory selection
# - resolver.py: Word to note resolution
# - context.py: VaultContext orchestrating refreshes and queries
# - tools.py: MCP tool handlers and server instance
# - main.py: Entry point and server initialization
