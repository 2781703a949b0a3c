import logging
from functools import partial

import gradio as gr

from field_extractor.config import settings
from field_extractor.handlers import (
    field_label,
    handle_dataset_a_text,
    handle_dataset_b_text,
    handle_deselect_all,
    handle_field_choices,
    handle_file_upload,
    handle_group_toggle,
    handle_mode_change,
    handle_select_all,
    summary_text,
)
from field_extractor.handlers_export import export_buttons_update, export_data_handler, preview_handler
from field_extractor.io_utils import ACCEPTED_EXTENSIONS
from field_extractor.parsing import Dataset
from field_extractor.views import COMPARE, EXTRACT, derive_view, filter_view, grouped_visible_fields

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

HELP_TEXT = """
**Extract mode**
- Parses JSON, fenced JSON code blocks or console output
- Shows occurrence counts per field and highlights mixed data types
- Auto-groups numbered fields (e.g. driver1, driver2)
- Exports selected fields as CSV or JSON

**Compare mode**
- Paste two datasets side by side
- Shows which fields exist in A, B or both, and where values or types differ
- Export filters: All, Common only or Differences only
- Exports both datasets in a single file

**What this tool does not do**
- No data transformation or calculations
- No data validation or cleaning
- No merging of datasets
- No editing of field names or values
"""

# --- UI Definition ---
with gr.Blocks(title=settings.APP_TITLE) as demo:
    gr.Markdown(f"# {settings.APP_TITLE}")
    gr.Markdown("Paste or upload data dumps, pick the fields you need, and export them or compare two datasets.")

    with gr.Accordion("How it works", open=False):
        gr.Markdown(HELP_TEXT)

    # State
    dataset_a_state = gr.State(value=Dataset())
    dataset_b_state = gr.State(value=Dataset())
    selection_state = gr.State(value=frozenset())
    collapsed_state = gr.State(value=frozenset())

    mode_radio = gr.Radio(choices=[("Extract Mode", EXTRACT), ("Compare Mode", COMPARE)], value=EXTRACT, label="Mode")

    with gr.Row():
        with gr.Column():
            gr.Markdown("### Dataset A")
            text_a = gr.Textbox(label="Paste Your Data Here", lines=10, placeholder="Paste your JSON data here...")
            file_a = gr.File(label="Or upload a file", file_types=ACCEPTED_EXTENSIONS)
            status_a = gr.Textbox(label="Status", interactive=False)
        with gr.Column(visible=False) as dataset_b_column:
            gr.Markdown("### Dataset B")
            text_b = gr.Textbox(label="Paste Dataset B here", lines=10, placeholder="Paste Dataset B here...")
            file_b = gr.File(label="Or upload a file", file_types=ACCEPTED_EXTENSIONS)
            status_b = gr.Textbox(label="Status", interactive=False)

    summary_md = gr.Markdown(summary_text(EXTRACT, None, None))

    gr.Markdown("### Select Fields")
    with gr.Row():
        search_box = gr.Textbox(label="Search fields", placeholder="Search fields...", scale=3)
        hide_empty_cb = gr.Checkbox(label="Hide empty fields", value=False, scale=1)
    export_filter_radio = gr.Radio(
        choices=[("All Fields", "all"), ("Common Only", "common"), ("Differences Only", "differences")],
        value="all",
        label="Export Filter",
        visible=False,
    )
    with gr.Row():
        select_all_btn = gr.Button("Select All")
        deselect_all_btn = gr.Button("Deselect All")

    @gr.render(
        inputs=[mode_radio, dataset_a_state, dataset_b_state, selection_state, collapsed_state,
                search_box, hide_empty_cb, export_filter_radio],
    )
    def render_fields(mode, dataset_a, dataset_b, selection, collapsed, search_term, hide_empty, export_filter):
        view = derive_view(mode, dataset_a, dataset_b, sample_limit=settings.SAMPLE_LIMIT)
        if not view.keys:
            gr.Markdown("No fields loaded.")
            return

        visible = filter_view(view, search_term, hide_empty, export_filter)
        if not visible:
            gr.Markdown("No fields match the current filters.")
            return

        grouping = grouped_visible_fields(view, visible)
        record_count = (dataset_a or Dataset()).record_count
        selection = selection or frozenset()
        collapsed = collapsed or frozenset()

        def field_checkboxes(keys, label):
            boxes = gr.CheckboxGroup(
                choices=[(field_label(view, k, record_count), k) for k in keys],
                value=[k for k in keys if k in selection],
                label=label,
                show_label=False,
            )
            boxes.input(
                fn=partial(handle_field_choices, keys),
                inputs=[selection_state, boxes],
                outputs=[selection_state],
            )

        for prefix, members in grouping.groups.items():
            with gr.Accordion(f"{prefix} ({len(members)} fields)", open=prefix not in collapsed) as acc:
                field_checkboxes(members, prefix)
            for event in (acc.expand, acc.collapse):
                event(fn=partial(handle_group_toggle, prefix), inputs=[collapsed_state], outputs=[collapsed_state])

        if grouping.ungrouped:
            with gr.Accordion(f"Other fields ({len(grouping.ungrouped)})", open=True):
                field_checkboxes(grouping.ungrouped, "Other fields")

    gr.Markdown("### Export")
    with gr.Row():
        export_csv_btn = gr.Button("Export CSV", variant="primary", interactive=False)
        export_json_btn = gr.Button("Export JSON", variant="primary", interactive=False)
    export_status = gr.Textbox(label="Export Status", interactive=False)
    download_output = gr.File(label="Download Result")

    gr.Markdown("### Preview")
    preview_count = gr.Dropdown(
        choices=settings.PREVIEW_COUNTS,
        value=settings.DEFAULT_PREVIEW_COUNT,
        label="Preview records",
    )
    preview_table = gr.Dataframe(label="Preview", interactive=False)

    # --- Events ---
    text_a.change(
        fn=handle_dataset_a_text,
        inputs=[text_a, mode_radio, dataset_a_state, dataset_b_state, selection_state],
        outputs=[dataset_a_state, selection_state, status_a],
    )
    text_b.change(
        fn=handle_dataset_b_text,
        inputs=[text_b, mode_radio, dataset_a_state, dataset_b_state, selection_state],
        outputs=[dataset_b_state, selection_state, status_b],
    )
    file_a.upload(fn=partial(handle_file_upload, label="Dataset A"), inputs=[file_a], outputs=[text_a, status_a])
    file_b.upload(fn=partial(handle_file_upload, label="Dataset B"), inputs=[file_b], outputs=[text_b, status_b])

    mode_radio.change(
        fn=handle_mode_change,
        inputs=[mode_radio, dataset_a_state, dataset_b_state, selection_state],
        outputs=[selection_state, dataset_b_column, export_filter_radio],
    )

    for trigger in (mode_radio.change, dataset_a_state.change, dataset_b_state.change):
        trigger(fn=summary_text, inputs=[mode_radio, dataset_a_state, dataset_b_state], outputs=[summary_md])

    select_all_btn.click(
        fn=handle_select_all,
        inputs=[mode_radio, dataset_a_state, dataset_b_state, search_box, hide_empty_cb, export_filter_radio],
        outputs=[selection_state],
    )
    deselect_all_btn.click(
        fn=handle_deselect_all,
        inputs=[mode_radio, dataset_a_state, dataset_b_state, selection_state, search_box, hide_empty_cb,
                export_filter_radio],
        outputs=[selection_state],
    )

    selection_state.change(fn=export_buttons_update, inputs=[selection_state], outputs=[export_csv_btn, export_json_btn])
    for trigger in (selection_state.change, preview_count.change, mode_radio.change, dataset_a_state.change,
                    dataset_b_state.change):
        trigger(
            fn=preview_handler,
            inputs=[mode_radio, dataset_a_state, dataset_b_state, selection_state, preview_count],
            outputs=[preview_table],
        )

    export_csv_btn.click(
        fn=partial(export_data_handler, "csv"),
        inputs=[mode_radio, dataset_a_state, dataset_b_state, selection_state],
        outputs=[download_output, export_status],
    )
    export_json_btn.click(
        fn=partial(export_data_handler, "json"),
        inputs=[mode_radio, dataset_a_state, dataset_b_state, selection_state],
        outputs=[download_output, export_status],
    )

if __name__ == "__main__":
    demo.launch(server_name=settings.SERVER_NAME, server_port=settings.SERVER_PORT)
