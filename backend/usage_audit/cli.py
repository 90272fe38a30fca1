"""
Usage tracking CLI: the `usage-audit-track` command.

Records one AI-assisted session into the usage store, e.g. from a
post-commit hook:

  usage-audit-track
  usage-audit-track --model claude-3-opus --input-tokens 1500 --output-tokens 800
  usage-audit-track --tool Cursor --file src/app.py --file src/util.py
"""

import re

import click
from rich.console import Console

from usage_audit.services.audit import get_usage_tracker
from usage_audit.services.audit.normalize import to_number_or_zero

console = Console()

_LEADING_INT_RE = re.compile(r"\s*[+-]?\d+", re.ASCII)


def parse_token_count(value: str | None) -> int:
    """Leading integer of ``value`` ("1500abc" -> 1500); 0 if there is none."""
    match = _LEADING_INT_RE.match(value or "")
    return int(to_number_or_zero(match.group())) if match else 0


@click.command()
@click.version_option("0.1.0")
@click.option("--model", default="unknown", help="Model identifier, e.g. claude-3-opus.")
@click.option("--tool", default=None, help="AI tool name; detected from the environment if omitted.")
@click.option("--input-tokens", default="0", help="Prompt tokens. Unparseable values count as 0.")
@click.option("--output-tokens", default="0", help="Completion tokens. Unparseable values count as 0.")
@click.option("--file", "files", multiple=True, help="File touched by the change (repeatable).")
@click.option("--prompt", default=None, help="Prompt text; truncated before storing.")
@click.option("--commit", default=None, help="Commit hash.")
@click.option("--branch", default=None, help="Branch name.")
@click.option("--user", "user_id", default=None, help="User to attribute the session to.")
def main(model, tool, input_tokens, output_tokens, files, prompt, commit, branch, user_id):
    """Track AI usage for the current change.

    \b
    Environment variables used to detect the tool:
      CURSOR_SESSION_ID, CURSOR_VERSION      Cursor
      CLAUDE_SESSION_ID, ANTHROPIC_API_KEY   Claude Code
      GITHUB_COPILOT, COPILOT_SESSION        GitHub Copilot
    """
    session = get_usage_tracker().track(
        model=model,
        tool=tool,
        input_tokens=parse_token_count(input_tokens),
        output_tokens=parse_token_count(output_tokens),
        files=list(files),
        prompt=prompt,
        commit=commit,
        branch=branch,
        user_id=user_id,
    )

    console.print("[green]AI usage tracked:[/green]")
    console.print(f"   Session ID: {session.id}")
    console.print(f"   Tool: {session.tool}")
    console.print(f"   Model: {session.model}")
    console.print(
        f"   Tokens: {session.tokens.total} "
        f"(input: {session.tokens.input}, output: {session.tokens.output})"
    )
    console.print(f"   Files: {len(session.files)}")
    console.print(f"   Commit: {session.commit}")


if __name__ == "__main__":
    main()
