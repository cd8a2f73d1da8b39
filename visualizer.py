import json

import pandas as pd
import streamlit as st
from dotenv import load_dotenv

from moodmixer.config import load_settings
from moodmixer.insights import emotional_wave
from moodmixer.models import Language
from moodmixer.sentiment import mood_label
from moodmixer.state import JsonHistoryStore, parse_history
from moodmixer.translations import get_translation

load_dotenv()

# --- Helper Functions ---

def wave_chart_frame(history):
    """Index the 7-day wave by date so st.line_chart can plot mood and intensity."""
    wave = emotional_wave(history)
    if wave["count"].sum() == 0:
        return None
    return wave.set_index("date")[["mood", "intensity"]]


def ingredient_table(artifact):
    return pd.DataFrame(
        [{"part": i.part.value, "name": i.name, "reason": i.reason} for i in artifact.ingredients]
    )


# --- Main Streamlit App ---

def main():
    st.set_page_config(layout="wide", page_title="Mood Mixer: Menu of Memories")
    settings = load_settings()

    lang = Language.parse(st.sidebar.radio("Language", ["en", "zh"], index=0 if settings.language is Language.EN else 1))
    t = get_translation(lang)
    st.title(t["journeyTitle"])

    uploaded = st.sidebar.file_uploader("History JSON (optional)", type="json")
    if uploaded is not None:
        try:
            history = parse_history(json.loads(uploaded.getvalue().decode("utf-8")))
        except (UnicodeDecodeError, ValueError) as e:
            st.error(f"Error reading file: {e}")
            return
    else:
        history = JsonHistoryStore(settings.history_file).load()

    # --- Emotional wave ---
    st.header(t["waveTitle"])
    frame = wave_chart_frame(history)
    if frame is None:
        st.info(t["notEnoughData"])
    else:
        st.line_chart(frame)

    # --- Menu ---
    if not history:
        st.warning(f"{t['emptyShelf']} {t['emptyShelfSub']}")
        return

    for artifact in history:
        when = pd.Timestamp(artifact.created_at, unit="ms").strftime("%b %d, %H:%M")
        title = f"🍸 {artifact.name}  ·  {t[mood_label(artifact.mood_value)]}  ·  {when}"
        with st.expander(title):
            if artifact.language is not lang:
                st.caption(f"[{artifact.language.value}]")
            st.markdown(f"*{artifact.description}*")
            col1, col2, col3 = st.columns(3)
            col1.metric(t["moodLabel"], f"{artifact.mood_value:+.2f}")
            col2.metric(t["intensity"], f"{artifact.intensity:.0%}")
            col3.metric(t["sensation"], artifact.sensation)
            st.dataframe(ingredient_table(artifact), hide_index=True)
            if artifact.real_recipe:
                st.markdown(f"**{t['realRecipe']}:** {artifact.real_recipe.name}")
                for step in artifact.real_recipe.steps:
                    st.markdown(f"- {step}")
            if artifact.sonic_vibe:
                v = artifact.sonic_vibe
                st.markdown(f"**{t['sonicVibe']}:** {v.genre}, {v.tempo_bpm} BPM, {v.scale}. {v.description}")
            if artifact.coping_tip:
                st.markdown(f"> **{t['copingTip']}:** {artifact.coping_tip}")

if __name__ == "__main__":
    main()
