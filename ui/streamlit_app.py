import streamlit as st

from app.studio.formatting import format_flashcard, format_quiz_item, format_study_material
from ui.client import StudyApi, complete_generation
from ui.config import ClientConfig
from ui.state import AnswerState, CardFace, Phase, StudyViewState, Tab

st.set_page_config(page_title="StudyDesk", layout="centered")

if "config" not in st.session_state:
    st.session_state.config = ClientConfig.from_env()
if "view" not in st.session_state:
    st.session_state.view = StudyViewState()
if "uploader_key" not in st.session_state:
    st.session_state.uploader_key = 0

config: ClientConfig = st.session_state.config
view: StudyViewState = st.session_state.view

if config.dark_mode:
    st.markdown(
        "<style>.stApp { background-color: #111827; color: #e5e7eb; }</style>",
        unsafe_allow_html=True,
    )

st.title("📚 StudyDesk")
st.caption("Upload your notes and convert them into flashcards, quizzes and summaries instantly.")


def _on_generate() -> None:
    view.begin_generation()


def _on_reset() -> None:
    view.reset()
    # a new key gives an empty uploader widget
    st.session_state.uploader_key += 1


def _render_jump_buttons(deck, prefix: str) -> None:
    cols = st.columns(deck.size)
    for i, col in enumerate(cols):
        label = "●" if i == deck.index else "○"
        col.button(label, key=f"{prefix}_dot_{i}", on_click=deck.go_to, args=(i,))


def _render_flashcards() -> None:
    deck = view.flashcards
    card = deck.current
    if card is None:
        st.info("No flashcards were generated.")
        return

    st.caption(f"Card {deck.index + 1} of {deck.size}")
    with st.container(border=True):
        if deck.face is CardFace.REVEALED:
            st.markdown("**Answer**")
            st.write(card.answer)
        else:
            st.markdown("**Question**")
            st.write(card.question)

    label = "Flip back" if deck.face is CardFace.REVEALED else "Reveal answer"
    st.button(label, key=f"flip_{deck.index}", on_click=deck.flip)
    st.code(format_flashcard(card), language=None)

    prev_col, next_col = st.columns(2)
    prev_col.button("← Prev", key="card_prev", disabled=not deck.has_prev, on_click=deck.prev)
    next_col.button("Next →", key="card_next", disabled=not deck.has_next, on_click=deck.next)
    _render_jump_buttons(deck, "card")


def _render_quiz() -> None:
    deck = view.quiz
    item = deck.current
    if item is None:
        st.info("No quiz questions were generated.")
        return

    st.caption(f"Question {deck.index + 1} of {deck.size}")
    with st.container(border=True):
        st.markdown(f"**{item.question}**")
        if deck.state is AnswerState.UNANSWERED:
            for j, opt in enumerate(item.options):
                marker = "🔵 " if deck.selection == opt else ""
                st.button(f"{marker}{opt}", key=f"opt_{deck.index}_{j}", on_click=deck.select, args=(opt,))
            st.button("Submit Answer", key=f"submit_{deck.index}", disabled=deck.selection is None, on_click=deck.submit)
        else:
            if deck.is_correct():
                st.success("🎉 Correct!")
            else:
                st.error("❌ Not quite!")
                st.write(f"Your answer: {deck.selection}")
            st.write(f"Correct answer: {deck.correct_option() or item.answer}")

    st.code(format_quiz_item(item), language=None)

    prev_col, next_col = st.columns(2)
    prev_col.button("← Prev", key="quiz_prev", disabled=not deck.has_prev, on_click=deck.prev)
    next_col.button("Next →", key="quiz_next", disabled=not deck.has_next, on_click=deck.next)
    _render_jump_buttons(deck, "quiz")


uploaded = st.file_uploader(
    "PDF / TXT",
    type=["pdf", "txt"],
    key=f"uploader_{st.session_state.uploader_key}",
    disabled=view.phase is Phase.GENERATING,
)
if uploaded is not None:
    if not view.is_current_file(uploaded.file_id):
        view.select_file(
            uploaded.name,
            uploaded.getvalue(),
            uploaded.type or "application/octet-stream",
            file_id=uploaded.file_id,
        )
elif view.file is not None and view.phase is not Phase.GENERATING:
    view.reset()

generating = view.phase is Phase.GENERATING
st.button(
    "Processing…" if generating else "Generate Study Material",
    disabled=not view.trigger_enabled,
    on_click=_on_generate,
    use_container_width=True,
)

if generating:
    api = StudyApi(config)
    try:
        with st.spinner("Extracting text and generating study material…"):
            complete_generation(view, api)
    finally:
        api.close()
    st.rerun()

if view.phase is Phase.FAILED:
    st.error(view.error)

if view.phase in (Phase.READY, Phase.FAILED):
    st.button("🔄 Start over", on_click=_on_reset)

if view.phase is Phase.READY and view.result is not None:
    if view.truncated:
        st.warning("Your document was long, so only its beginning was used to generate this material.")

    # the view state owns the active tab, the radio only mirrors it
    st.session_state.tab_radio = view.tab.value
    st.radio(
        "View",
        [t.value for t in Tab],
        key="tab_radio",
        horizontal=True,
        label_visibility="collapsed",
        on_change=lambda: view.set_tab(Tab(st.session_state.tab_radio)),
    )

    if view.tab is Tab.FLASHCARDS:
        _render_flashcards()
    elif view.tab is Tab.QUIZ:
        _render_quiz()
    else:
        with st.container(border=True):
            st.write(view.result.summary)
        st.code(view.result.summary, language=None)

    st.download_button(
        "⬇️ Download study material",
        data=format_study_material(view.result),
        file_name="study-material.txt",
        mime="text/plain",
    )

if view.phase in (Phase.IDLE, Phase.SELECTED):
    st.info("Upload your notes and click generate to see flashcards, quiz and summary.")
