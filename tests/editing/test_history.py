from stepflow.editing import AddNode, EditHistory, EditLabel
from stepflow.flowchart import generate_flowchart


def _history(settings, **kwargs):
    return EditHistory(generate_flowchart("Step 1: A\nStep 2: B", settings=settings), **kwargs)


def test_undo_and_redo(settings):
    history = _history(settings)
    history.apply(EditLabel("step-1", "First"))
    history.apply(EditLabel("step-2", "Second"))

    assert history.can_undo and not history.can_redo
    assert history.undo().get_node("step-2").label == "B"
    assert history.undo().get_node("step-1").label == "A"
    assert not history.can_undo
    assert history.undo().get_node("step-1").label == "A"

    assert history.redo().get_node("step-1").label == "First"
    assert history.can_redo


def test_new_command_clears_redo(settings):
    history = _history(settings)
    history.apply(AddNode())
    history.undo()
    history.apply(EditLabel("step-1", "Changed"))
    assert not history.can_redo


def test_limit_drops_oldest_snapshots(settings):
    history = _history(settings, limit=2)
    for label in ("x", "y", "z"):
        history.apply(EditLabel("step-1", label))
    history.undo()
    history.undo()
    assert not history.can_undo
    assert history.current.get_node("step-1").label == "x"


def test_reset_drops_history(settings):
    history = _history(settings)
    history.apply(AddNode())
    replacement = generate_flowchart("Step 1: Only", settings=settings)
    history.reset(replacement)
    assert history.current is replacement
    assert not history.can_undo and not history.can_redo
