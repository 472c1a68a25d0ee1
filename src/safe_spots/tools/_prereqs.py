"""Prerequisite checking helpers for MCP tools."""


def require_state(catalog, *, loaded: bool = False, session: bool = False, selected: bool = False) -> None:
    """Raise ValueError with a descriptive message if required state is not set.

    Usage in a tool:
        try:
            require_state(catalog, loaded=True, session=True)
        except ValueError as e:
            return f"Error: {e}"
    """
    if loaded and catalog.state.status != "ready":
        raise ValueError(
            "Load the spot catalog first with load_catalog."
        )
    if session and not catalog.session.is_active:
        raise ValueError(
            "Start a spot session first with start_add_spot or start_edit_spot."
        )
    if selected and catalog.selected_spot is None:
        raise ValueError(
            "Select a spot first with select_spot."
        )
