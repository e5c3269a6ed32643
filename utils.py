import plotly.graph_objects as go


def create_flight_path_plot(path_coords, polygon=None):
    """Create a Plotly figure showing the flight path over the survey area"""
    x_coords, y_coords = zip(*path_coords)

    fig = go.Figure()

    if polygon:
        outline = list(polygon) + [polygon[0]]
        px, py = zip(*outline)
        fig.add_trace(go.Scatter(
            x=px,
            y=py,
            mode='lines',
            name='Survey Area',
            line=dict(color='orange', width=2, dash='dot'),
            fill='toself',
            opacity=0.4
        ))

    # Add flight path
    fig.add_trace(go.Scatter(
        x=x_coords,
        y=y_coords,
        mode='lines+markers',
        name='Flight Path',
        line=dict(color='blue', width=2),
        marker=dict(size=6)
    ))

    # Add start point
    fig.add_trace(go.Scatter(
        x=[x_coords[0]],
        y=[y_coords[0]],
        mode='markers',
        name='Start',
        marker=dict(size=12, color='green', symbol='star')
    ))

    # Add end point
    fig.add_trace(go.Scatter(
        x=[x_coords[-1]],
        y=[y_coords[-1]],
        mode='markers',
        name='End',
        marker=dict(size=12, color='red', symbol='square')
    ))

    fig.update_layout(
        title="Flight Path Visualization",
        xaxis_title="Longitude",
        yaxis_title="Latitude",
        showlegend=True,
        xaxis_scaleanchor="y",
        xaxis_scaleratio=1,
    )

    return fig
