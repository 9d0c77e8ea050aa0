import plotly.express as px
import pandas as pd


def export_miss_rate_timeline(timeline, path: str, title: str = "Cumulative Miss Rate"):
    if not timeline:
        with open(path, "w") as f:
            f.write("<h1>Miss Rate Timeline</h1><p>No data to display.</p>")
        return

    df = pd.DataFrame(timeline)
    df['order'] = pd.to_numeric(df['order'], errors='coerce')
    df['miss_rate'] = pd.to_numeric(df['miss_rate'], errors='coerce')
    df = df.dropna(subset=['order', 'miss_rate'])

    hover_data_cols = ['accesses', 'misses', 'total_time']
    existing_hover_cols = [c for c in hover_data_cols if c in df.columns]

    fig = px.line(
        df,
        x="order",
        y="miss_rate",
        markers=True,
        hover_data=existing_hover_cols,
        title=title,
        labels={"order": "Access Order", "miss_rate": "Miss Rate"},
    )
    fig.update_yaxes(range=[0, 1], tickformat=".0%")
    fig.update_layout(font=dict(family="Courier New, monospace", size=12))

    fig.write_html(path, include_plotlyjs="cdn", full_html=True)


def export_sweep_chart(df: pd.DataFrame, path: str):
    if df.empty:
        with open(path, "w") as f:
            f.write("<h1>Cache Sweep</h1><p>No data to display.</p>")
        return

    df = df.dropna(subset=['miss_rate']).sort_values(['associativity', 'size_kb'])
    df = df.assign(associativity=df['associativity'].astype(str) + "-way")

    fig = px.line(
        df,
        x="size_kb",
        y="miss_rate",
        color="associativity",
        markers=True,
        hover_data=['total_misses', 'total_time'],
        title="Miss Rate vs Cache Size",
        labels={"size_kb": "Cache Size (KB)", "miss_rate": "Miss Rate", "associativity": "Associativity"},
    )
    fig.update_xaxes(type="log")
    fig.update_yaxes(tickformat=".0%")
    fig.update_layout(font=dict(family="Courier New, monospace", size=12))

    fig.write_html(path, include_plotlyjs="cdn", full_html=True)


def export_miss_rate_ascii(timeline, height: int = 10, width: int = 80):
    if not timeline:
        return "Timeline is empty."

    points = timeline
    if len(points) > width:
        step = len(points) / width
        points = [timeline[int(i * step)] for i in range(width)]

    rows = [[' '] * len(points) for _ in range(height)]
    for col, point in enumerate(points):
        level = min(int(point['miss_rate'] * height), height - 1)
        for row in range(level + 1):
            rows[height - 1 - row][col] = '#'

    chart = "Cumulative Miss Rate (ASCII)\n"
    chart += "-" * (len(points) + 8) + "\n"
    for i, row in enumerate(rows):
        label = f"{(height - i) / height:>5.0%}" if i % 2 == 0 else " " * 5
        chart += f"{label} |" + "".join(row) + "\n"
    chart += "-" * (len(points) + 8) + "\n"
    chart += f"order 0 .. {timeline[-1]['order']}\n"

    return chart
