"""Card entities, vocabulary parsing and face rendering.

Exports are lazily loaded so parsing and the store do not pull in Pillow.
"""

__all__ = [
    # model.py
    "Card",
    "CardStore",
    # parser.py
    "parse_line",
    "parse_vocabulary",
    # faces.py
    "render_front",
    "render_back",
    "PALETTE",
]


def __getattr__(name: str):
    """Lazy import for module exports."""
    if name in ("Card", "CardStore"):
        from vocabart.cards import model
        return getattr(model, name)
    elif name in ("parse_line", "parse_vocabulary"):
        from vocabart.cards import parser
        return getattr(parser, name)
    elif name in ("render_front", "render_back", "PALETTE"):
        from vocabart.cards import faces
        return getattr(faces, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
