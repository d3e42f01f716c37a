"""
Main NiceGUI application for Graph Room.

Renders the canvas with ui.interactive_image (SVG content rebuilt from the
current snapshot on every change), wires pointer events to the
InteractionController and provides the toolbar, dialogs, adjacency matrix
view and JSON import/export.
"""

import logging

from dotenv import load_dotenv
from nicegui import ui, run

load_dotenv()

from graphroom.config import get_settings
from graphroom.edit import (
    InteractionController,
    InteractionMode,
    GraphCommands,
    EdgeContextMenu,
    CreateEdgeRequest,
    EditEdgeRequest,
    RenameRequest,
    setup_edit_handlers,
)
from graphroom.conversion import default_export_name, parse_weight_input
from graphroom.errors import GraphError, ValidationError
from graphroom.graph import EdgeDirection
from graphroom.graph_store import GraphStore
from graphroom.graph_viz import GraphVisualizer

settings = get_settings()
logging.basicConfig(level=settings.log_level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
logger = logging.getLogger(__name__)

DIRECTION_OPTIONS = {
    EdgeDirection.FORWARD.value: 'From A → B (default)',
    EdgeDirection.UNDIRECTED.value: 'Undirected (no arrow)',
    EdgeDirection.REVERSE.value: 'Reversed (B → A)',
}


def show_rename_dialog(commands: GraphCommands, node_id, on_done):
    """Show modal dialog to rename a node."""
    node = commands.store.get_node(node_id)
    if node is None:
        return None

    with ui.dialog() as dialog, ui.card().classes('w-96 bg-neutral-900 text-neutral-100'):
        ui.label('Edit Node').classes('text-lg font-bold')
        name_input = ui.input('Name', value=node.label).classes('w-full')

        def save():
            commands.rename_node(node_id, name_input.value or '')
            dialog.close()
            on_done()

        with ui.row().classes('w-full justify-end gap-2 mt-4'):
            ui.button('Cancel', on_click=dialog.close).props('flat')
            ui.button('Save', on_click=save).props('color=primary')

    dialog.open()
    return dialog


def show_edge_dialog(commands: GraphCommands, on_done, pending: CreateEdgeRequest = None, edge_id=None):
    """Show modal dialog to create (pending) or edit (edge_id) an edge."""
    existing = commands.store.get_edge(edge_id) if edge_id is not None else None
    if existing is None and pending is None:
        return None

    source = existing.source if existing else pending.source_id
    target = existing.target if existing else pending.target_id
    weight = str(existing.weight) if existing else '1'
    direction = existing.direction.value if existing else EdgeDirection.FORWARD.value

    with ui.dialog() as dialog, ui.card().classes('w-96 bg-neutral-900 text-neutral-100'):
        ui.label('Edit connection' if existing else 'New connection').classes('text-lg font-bold')
        ui.label(f'From: {source} · To: {target}').classes('text-sm text-neutral-400')

        weight_input = ui.input('Weight (integer ≥ 0)', value=weight, placeholder='1').classes('w-full')
        error_label = ui.label('').classes('text-sm text-red-400')
        ui.label('Direction').classes('text-sm font-medium mt-2')
        direction_radio = ui.radio(DIRECTION_OPTIONS, value=direction)

        def confirm():
            try:
                value = parse_weight_input(weight_input.value)
            except ValidationError as e:
                error_label.text = str(e)
                return
            try:
                if existing:
                    commands.confirm_edit_edge(existing.id, value, direction_radio.value)
                else:
                    commands.confirm_create_edge(pending.source_id, pending.target_id, value, direction_radio.value)
            except GraphError as e:
                ui.notify(f'Could not save edge: {e}', type='negative')
            dialog.close()
            on_done()

        with ui.row().classes('w-full justify-end gap-2 mt-4'):
            ui.button('Cancel', on_click=dialog.close).props('flat')
            ui.button('Save', on_click=confirm).props('color=primary')

    dialog.open()
    return dialog


def show_matrix_dialog(commands: GraphCommands):
    """Show the adjacency matrix of the current graph."""
    matrix = commands.adjacency_matrix()

    with ui.dialog() as dialog, ui.card().classes('min-w-[600px] max-w-[90vw] bg-neutral-900 text-neutral-100'):
        ui.label('Adjacency matrix').classes('text-lg font-bold')
        ui.label(f'Size: {matrix.size} × {matrix.size}').classes('text-xs text-neutral-400')
        if matrix.size == 0:
            ui.label('No nodes to show.').classes('text-neutral-400 text-sm')
        else:
            columns, rows = matrix.as_table()
            ui.table(columns=columns, rows=rows, row_key='id').classes('w-full max-h-[60vh]').props('dense flat bordered')
        with ui.row().classes('w-full justify-end mt-4'):
            ui.button('Close', on_click=dialog.close).props('flat')

    dialog.open()
    return dialog


def show_export_dialog(commands: GraphCommands):
    """Ask for a filename, then download the serialized graph."""
    with ui.dialog() as dialog, ui.card().classes('w-96 bg-neutral-900 text-neutral-100'):
        ui.label('Export JSON').classes('text-lg font-bold')
        name_input = ui.input('File name', placeholder=default_export_name()).classes('w-full')

        def do_export():
            filename = commands.export_filename(name_input.value)
            ui.download(commands.export_graph().encode('utf-8'), filename)
            logger.info(f"Exported graph as {filename}")
            dialog.close()

        with ui.row().classes('w-full justify-end gap-2 mt-4'):
            ui.button('Cancel', on_click=dialog.close).props('flat')
            ui.button('Download', on_click=do_export).props('color=primary')

    dialog.open()
    return dialog


def show_import_dialog(commands: GraphCommands, on_done):
    """Upload a JSON file and replace the graph with it."""
    with ui.dialog() as dialog, ui.card().classes('w-96 bg-neutral-900 text-neutral-100'):
        ui.label('Import JSON').classes('text-lg font-bold')
        ui.label('The current graph will be replaced.').classes('text-sm text-neutral-400')

        async def handle_upload(e):
            try:
                data = await run.io_bound(e.content.read)
                commands.import_graph(data.decode('utf-8'))
            except (GraphError, UnicodeDecodeError, OSError) as err:
                ui.notify(f'Error importing JSON: {err}', type='negative')
                return
            ui.notify(f'Imported {e.name}', type='positive')
            dialog.close()
            on_done()

        ui.upload(on_upload=handle_upload, auto_upload=True, max_files=1).props('accept=application/json').classes('w-full')
        with ui.row().classes('w-full justify-end mt-4'):
            ui.button('Cancel', on_click=dialog.close).props('flat')

    dialog.open()
    return dialog


@ui.page('/')
def main_page():
    ui.dark_mode().enable()

    # One store per browser tab; everything else reads it by reference
    store = GraphStore()
    controller = InteractionController(store)
    commands = GraphCommands(store, controller)
    visualizer = GraphVisualizer()
    toolbar = {}

    def refresh_canvas():
        canvas.content = visualizer.generate_svg(store.snapshot(), controller.state)
        hint_label.text = controller.hint()
        mode = controller.mode
        for button_mode, (button, label, color) in toolbar.items():
            active = mode is button_mode
            button.text = f'{label}: ON' if active else label
            button.props(f'color={color if active else "grey-8"}')

    # --- Context menu with scoped dismissal listeners ---

    overlay_layer = ui.element('div')

    def subscribe_dismiss(on_dismiss):
        def dismiss():
            on_dismiss()
            refresh_canvas()

        def on_key(e):
            if e.key == 'Escape' and e.action.keydown:
                dismiss()

        with overlay_layer:
            backdrop = ui.element('div').classes('fixed inset-0 z-40')
            backdrop.on('click', dismiss)
            backdrop.on('contextmenu.prevent', dismiss)
            keyboard = ui.keyboard(on_key=on_key)

        def unsubscribe():
            backdrop.delete()
            keyboard.delete()
        return unsubscribe

    def on_menu_change(state):
        menu_card.set_visibility(state.visible)
        if state.visible:
            menu_card.style(f'left: {state.x}px; top: {state.y}px')

    context_menu = EdgeContextMenu(commands, subscribe_dismiss, on_change=on_menu_change)

    def menu_delete():
        context_menu.delete()
        refresh_canvas()

    # --- Dialog requests from the controller ---

    def dispatch(request):
        if isinstance(request, CreateEdgeRequest):
            show_edge_dialog(commands, refresh_canvas, pending=request)
        elif isinstance(request, EditEdgeRequest):
            if request.from_context_menu:
                context_menu.open(request.edge_id, request.x, request.y)
            else:
                show_edge_dialog(commands, refresh_canvas, edge_id=request.edge_id)
        elif isinstance(request, RenameRequest):
            show_rename_dialog(commands, request.node_id, refresh_canvas)

    controller.set_dispatcher(dispatch)

    def clear_graph():
        commands.clear_graph()
        refresh_canvas()

    def toggle(command):
        def handler():
            command()
            refresh_canvas()
        return handler

    # --- Layout ---

    with ui.column().classes('w-full h-screen gap-3 p-4 bg-neutral-900 text-neutral-100'):
        with ui.row().classes('w-full items-center gap-2 border-b border-neutral-800 pb-2'):
            ui.label(settings.title).classes('text-xl font-semibold mr-4')
            for mode, label, color, command in (
                (InteractionMode.ADD_NODE, 'Add node', 'primary', commands.toggle_add_node),
                (InteractionMode.DELETE_NODE, 'Delete node', 'negative', commands.toggle_delete_node),
                (InteractionMode.DELETE_EDGE, 'Delete edge', 'negative', commands.toggle_delete_edge),
            ):
                button = ui.button(label, on_click=toggle(command)).props('unelevated')
                toolbar[mode] = (button, label, color)

            ui.separator().props('vertical')
            ui.button('Export JSON', on_click=lambda: show_export_dialog(commands)).props('flat')
            ui.button('Import JSON', on_click=lambda: show_import_dialog(commands, refresh_canvas)).props('flat')
            ui.button('Adjacency matrix', on_click=lambda: show_matrix_dialog(commands)).props('flat')
            ui.button('Clear', on_click=clear_graph).props('flat color=negative')

        hint_label = ui.label('').classes('text-xs text-neutral-400')

        handlers = setup_edit_handlers(commands, refresh_canvas)
        with ui.element('div').classes('relative overflow-auto'):
            canvas = ui.interactive_image(
                size=(settings.canvas_width, settings.canvas_height),
                on_mouse=handlers['handle_mouse'],
                events=['mousedown', 'mousemove', 'mouseup', 'click', 'dblclick', 'contextmenu'],
                cross=False,
            ).classes('border border-neutral-800 rounded-md bg-neutral-950').style(f'width: {settings.canvas_width}px')
            canvas.on('contextmenu', js_handler='(e) => e.preventDefault()')

            # positioned in canvas coordinates, above the backdrop
            menu_card = ui.card().classes('absolute z-50 p-0 min-w-40 bg-neutral-900 text-neutral-100 border border-neutral-700')
            menu_card.set_visibility(False)
            with menu_card:
                ui.button('Edit edge', on_click=context_menu.edit).props('flat align=left').classes('w-full')
                ui.button('Delete edge', on_click=menu_delete).props('flat align=left color=red-4').classes('w-full')

    refresh_canvas()


if __name__ in {"__main__", "__mp_main__"}:
    ui.run(
        title=settings.title,
        port=settings.port,
        reload=False,
    )
