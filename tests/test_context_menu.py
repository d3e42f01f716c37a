import pytest

from graphroom.edit import EdgeContextMenu, GraphCommands, InteractionController, MenuState
from graphroom.edit.controller import EditEdgeRequest
from graphroom.graph_store import GraphStore


class FakeListeners:
    """Records subscriptions the way the page-level backdrop/keyboard would."""

    def __init__(self):
        self.active = []
        self.released = 0

    def subscribe(self, on_dismiss):
        self.active.append(on_dismiss)

        def unsubscribe():
            self.active.remove(on_dismiss)
            self.released += 1
        return unsubscribe

    def dismiss(self):
        for callback in list(self.active):
            callback()


@pytest.fixture
def listeners():
    return FakeListeners()


@pytest.fixture
def setup(listeners):
    store = GraphStore()
    store.add_node((0, 0))
    store.add_node((100, 0))
    edge = store.create_edge("1", "2", 2)
    controller = InteractionController(store)
    requests = []
    controller.set_dispatcher(requests.append)
    menu = EdgeContextMenu(GraphCommands(store, controller), listeners.subscribe)
    return store, menu, edge, requests


def test_listeners_only_exist_while_open(setup, listeners):
    _, menu, edge, _ = setup
    assert listeners.active == []

    menu.open(edge.id, 30, 40)
    assert menu.state == MenuState(visible=True, x=30, y=40, edge_id=edge.id)
    assert len(listeners.active) == 1

    menu.close()
    assert listeners.active == []
    assert not menu.is_subscribed
    assert menu.state == MenuState()


def test_reopen_replaces_subscription(setup, listeners):
    _, menu, edge, _ = setup
    menu.open(edge.id, 1, 1)
    menu.open(edge.id, 2, 2)

    assert len(listeners.active) == 1
    assert listeners.released == 1


def test_dismiss_closes_menu(setup, listeners):
    _, menu, edge, _ = setup
    menu.open(edge.id, 0, 0)
    listeners.dismiss()

    assert not menu.state.visible
    assert listeners.active == []


def test_close_is_idempotent(setup, listeners):
    _, menu, edge, _ = setup
    menu.close()
    menu.open(edge.id, 0, 0)
    menu.close()
    menu.close()
    assert listeners.released == 1


def test_edit_requests_dialog(setup, listeners):
    _, menu, edge, requests = setup
    menu.open(edge.id, 0, 0)

    assert menu.edit() == EditEdgeRequest(edge_id=edge.id)
    assert requests == [EditEdgeRequest(edge_id=edge.id)]
    assert listeners.active == []


def test_delete_removes_edge(setup, listeners):
    store, menu, edge, _ = setup
    menu.open(edge.id, 0, 0)
    menu.delete()

    assert store.edges == []
    assert not menu.state.visible


def test_on_change_receives_states(listeners):
    store = GraphStore()
    seen = []
    menu = EdgeContextMenu(GraphCommands(store, InteractionController(store)),
                           listeners.subscribe, on_change=seen.append)
    menu.open("e", 5, 6)
    menu.close()
    assert [s.visible for s in seen] == [True, False]
