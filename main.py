from __future__ import annotations
import streamlit as st
import pandas as pd
import numpy as np
import matplotlib.pyplot as plt
import networkx as nx
import io
from dataclasses import replace

from text_summarizer.acquisition import convert_by_extension, load_text
from text_summarizer.constants import DEFAULT_MAX_ITERATIONS, DEFAULT_TARGET_SIZE, DEFAULT_TIMEOUT
from text_summarizer.datatypes import SIMILARITY_MODES, SummarizationRequest
from text_summarizer.errors import SummarizerError
from text_summarizer.graphing import build_graph
from text_summarizer.planning import plan, plan_count
from text_summarizer.preprocessing import build_document
from text_summarizer.ranking import rank_with_stats
from text_summarizer.summarize import select, summarize

def _preview(text: str, limit: int = 80) -> str:
    return text[:limit] + "..." if len(text) > limit else text

def draw_graph_visualization(graph, scores, selected_idx):
    """Draw the similarity graph; node size follows score, selected sentences in yellow."""
    G = nx.Graph()
    for s in graph.nodes:
        G.add_node(s.idx)
    for edge in graph.edges:
        G.add_edge(edge.i, edge.j, weight=edge.weight)

    fig, ax = plt.subplots(figsize=(10, 8))
    ax.set_title("Similarity Graph (selected sentences highlighted)", fontsize=14, fontweight='bold')

    pos = nx.spring_layout(G, k=2, iterations=50, seed=42)
    top = max(scores.values()) if scores else 1.0
    sizes = [300 + 1200 * (scores.get(i, 0.0) / top) for i in G.nodes()]
    colors = ['yellow' if i in selected_idx else 'lightblue' for i in G.nodes()]
    nx.draw_networkx_nodes(G, pos, ax=ax, node_color=colors, node_size=sizes, alpha=0.8)

    edges = G.edges(data=True)
    if edges:
        weights = [d['weight'] for _, _, d in edges]
        max_weight = max(weights)
        nx.draw_networkx_edges(G, pos, ax=ax,
                               width=[3 * (w / max_weight) for w in weights],
                               alpha=0.6, edge_color='gray')

    nx.draw_networkx_labels(G, pos, {i: f"S{i+1}" for i in G.nodes()}, ax=ax,
                            font_size=10, font_weight='bold')
    if len(G.nodes) <= 10:
        edge_labels = {(u, v): f"{d['weight']:.2f}" for u, v, d in G.edges(data=True)}
        nx.draw_networkx_edge_labels(G, pos, edge_labels, ax=ax, font_size=8)

    ax.set_aspect('equal')
    ax.axis('off')
    plt.tight_layout()

    buf = io.BytesIO()
    plt.savefig(buf, format='png', dpi=150, bbox_inches='tight')
    buf.seek(0)
    plt.close(fig)
    return buf

def create_sidebar_controls():
    st.sidebar.header("Parameters")
    mode = st.sidebar.radio("Budget", ["Target size (chars)", "Sentence count"])
    if mode == "Sentence count":
        target_size, target_count = None, st.sidebar.number_input("Sentences", min_value=1, value=3, step=1)
    else:
        target_size, target_count = st.sidebar.number_input(
            "Target size", min_value=1, value=DEFAULT_TARGET_SIZE, step=64), None
    timeout = st.sidebar.number_input("Timeout (s)", min_value=0.1, value=DEFAULT_TIMEOUT, step=0.5)
    max_iterations = st.sidebar.number_input("Max iterations", min_value=1, value=DEFAULT_MAX_ITERATIONS, step=10)
    similarity = st.sidebar.selectbox("Similarity", SIMILARITY_MODES)

    st.sidebar.header("Debug Options")
    debug_mode = st.sidebar.checkbox("Enable Debug Mode", value=True, help="Show detailed pipeline steps")

    return SummarizationRequest(
        text="", target_size=target_size, target_count=target_count,
        max_iterations=int(max_iterations), timeout=float(timeout), similarity=similarity,
    ), debug_mode

def debug_pipeline(request: SummarizationRequest) -> str:
    """Run the pipeline stage by stage, showing what each one produced."""
    text = request.text

    st.header("Step 1: Segmentation")
    with st.expander("Sentences", expanded=True):
        doc = build_document(text)
        st.success(f"Segmented into {len(doc.sentences)} sentences")
        st.dataframe(pd.DataFrame([{
            "Sentence #": s.idx + 1,
            "Span": f"{s.start}-{s.end}",
            "Text": _preview(s.text),
            "Terms": ", ".join(s.tokens[:8]) + ("..." if len(s.tokens) > 8 else ""),
        } for s in doc.sentences]), use_container_width=True)

    st.header("Step 2: Compression Plan")
    n = len(doc.sentences)
    if request.target_count is not None:
        compression = plan_count(n, request.target_count)
    else:
        compression = plan(len(text), n, request.target_size)
    col1, col2, col3 = st.columns(3)
    col1.metric("Contents size", len(text))
    col2.metric("Required compression", f"{compression.compression_ratio:.3f}")
    col3.metric("Target sentences", compression.target_sentence_count)
    if compression.target_sentence_count == 0:
        st.warning("Nothing to summarize")
        return ""

    st.header("Step 3: Similarity Graph")
    with st.expander("Graph Details", expanded=True):
        graph = build_graph(doc.sentences, similarity=request.similarity)
        max_possible = n * (n - 1) // 2
        col1, col2 = st.columns(2)
        col1.metric("Edges", len(graph.edges))
        col2.metric("Density", f"{(len(graph.edges) / max_possible if max_possible else 0):.2%}")
        if n <= 50:
            labels = [f"S{i+1}" for i in range(n)]
            st.dataframe(pd.DataFrame(graph.to_matrix(), columns=labels, index=labels),
                         use_container_width=True)
        else:
            weights = np.array([e.weight for e in graph.edges])
            st.info(f"Matrix too large to display ({n}x{n})")
            col1, col2 = st.columns(2)
            col1.metric("Mean Similarity", f"{weights.sum() / max_possible:.3f}")
            col2.metric("Max Similarity", f"{weights.max() if len(weights) else 0.0:.3f}")

    st.header("Step 4: Bounded Ranking")
    scores, rounds = rank_with_stats(graph, max_iterations=request.max_iterations, timeout=request.timeout)
    st.success(f"Ranking finished in {rounds} of at most {request.max_iterations} rounds")

    st.header("Step 5: Selection")
    chosen = select(scores, doc.sentences, compression.target_sentence_count)
    chosen_idx = {s.idx for s in chosen}
    st.dataframe(pd.DataFrame([{
        "Sentence #": s.idx + 1,
        "Score": f"{scores[s.idx]:.4f}",
        "Selected": "yes" if s.idx in chosen_idx else "",
        "Text": s.text,
    } for s in doc.sentences]), use_container_width=True)

    if n <= 50:
        st.image(draw_graph_visualization(graph, scores, chosen_idx),
                 caption="Node size follows salience score")
    return " ".join(s.text for s in chosen)

def main():
    st.title("Bounded Extractive Summarizer")
    st.write("Summarize a text file or web page within a size budget and a deadline")

    request, debug_mode = create_sidebar_controls()

    uploaded_file = st.file_uploader("Choose a text file", type=['txt', 'rtf', 'md'])
    url = st.text_input("...or a page URL")

    text = None
    try:
        if uploaded_file is not None:
            text = convert_by_extension(uploaded_file.read().decode("utf-8"), uploaded_file.name)
        elif url:
            text = load_text(url)
    except (SummarizerError, UnicodeDecodeError) as e:
        st.error(f"Could not load content: {e}")

    if text is None:
        return

    st.subheader("Original Text")
    st.text_area("Content", text, height=200, disabled=True)

    if st.button("Generate Summary", type="primary"):
        run = replace(request, text=text)
        try:
            if debug_mode:
                st.markdown("---")
                st.title("Pipeline Debug Mode")
                summary = debug_pipeline(run)
            else:
                with st.spinner("Generating summary..."):
                    summary = summarize(run).text
        except SummarizerError as e:
            st.error(f"Could not summarize text: {e}")
            return

        st.markdown("---")
        st.header("Final Summary")
        st.text_area("Generated Summary", summary, height=150, disabled=True)
        col1, col2, col3 = st.columns(3)
        col1.metric("Original Length", len(text))
        col2.metric("Summary Length", len(summary))
        col3.metric("Actual Compression", f"{(len(summary) / len(text) if text else 0):.2%}")

if __name__ == "__main__":
    main()
