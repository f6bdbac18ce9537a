class DiagramRenderError(RuntimeError):
    """The diagram renderer failed to produce markup for a block."""

    def __init__(self, diagram_id: str, message: str) -> None:
        super().__init__(f"Diagram {diagram_id} failed to render: {message}")
        self.diagram_id = diagram_id


class HandledRenderError(Exception):
    """An error that has already been displayed to the user.
    The CLI exits with a failure status without showing a traceback."""

    pass
