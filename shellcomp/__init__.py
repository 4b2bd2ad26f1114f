"""shellcomp - shell completion scripts from a single CLI description.

A program is described once as a `shellcomp.models.Schema` (built from a
JSON/TOML document or from an argparse parser) and compiled by
`shellcomp.generators.generate` into a Bash, Zsh, Fish or PowerShell
completion script.
"""
