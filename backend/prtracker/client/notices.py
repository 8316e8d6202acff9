from dataclasses import dataclass


@dataclass(frozen=True)
class Notice:
    """A message the UI shows to the user (toast)."""

    title: str
    description: str = ""
    variant: str = "default"  # or "destructive"


def failure(title: str, error: Exception) -> Notice:
    description = getattr(error, "message", None) or str(error)
    return Notice(title=title, description=description, variant="destructive")
