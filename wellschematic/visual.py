try:
    import plotly.graph_objects as go
    PLOTLY = True
except ImportError:
    PLOTLY = False

from .config import DiagramConfiguration, load_configuration
from .diagram import Drawing, Shape

LINE_COLORS = {
    'centerline': 'grey',
    'boreline': 'black',
}


def _hovertext(shape: Shape):
    feature = shape.feature
    if feature is None:
        return None
    text = [type(feature).__name__]
    for field in ('md', 'start_md', 'end_md', 'value'):
        if hasattr(feature, field):
            text.append(f"{field}: {getattr(feature, field)}")
    return "<br>".join(text)


def _trace(shape: Shape, show_tooltips: bool = True):
    x, y = shape.points.T
    hovertext = _hovertext(shape) if show_tooltips else None
    hoverinfo = 'text' if hovertext else 'skip'

    if shape.closed:
        return go.Scatter(
            x=x, y=y,
            mode='lines',
            fill='toself',
            fillcolor=shape.color,
            line=dict(color=shape.color, width=1),
            name=shape.kind,
            hovertext=hovertext,
            hoverinfo=hoverinfo,
            showlegend=False
        )

    return go.Scatter(
        x=x, y=y,
        mode='lines',
        line=dict(
            color=LINE_COLORS.get(shape.kind),
            width=1,
            dash='dash' if shape.kind == 'centerline' else None
        ),
        name=shape.kind,
        hoverinfo='skip',
        showlegend=False
    )


def figure(drawing: Drawing, configuration: DiagramConfiguration = None,
           **kwargs):
    """
    Renders a drawing as a plotly figure.

    Parameters
    ----------
    drawing: Drawing
        As returned by ``WellboreDiagram.draw``.
    configuration: DiagramConfiguration (default: None)
        Controls the TVD scale, grid and tooltips. Defaults to
        ``load_configuration()``.
    kwargs:
        ``layout`` and ``traces`` dicts to update the figure with.

    Returns
    -------
    fig: plotly.graph_objects.Figure
    """
    assert PLOTLY, "ImportError: try pip install plotly"
    if configuration is None:
        configuration = load_configuration()

    scales = configuration.wellbore.scales

    fig = go.Figure()
    for shape in drawing.shapes:
        fig.add_trace(_trace(shape, configuration.show_tooltips))

    xaxis = dict(
        showticklabels=False,
        showgrid=False,
        zeroline=False,
    )
    yaxis = dict(
        title='TVD' if scales.tvd_scale_display else None,
        autorange="reversed",
        scaleanchor='x',
        scaleratio=1,
        showticklabels=scales.tvd_scale_display,
        showgrid=scales.tvd_scale_grid_display,
        zeroline=False,
    )

    if drawing.ticks:
        yaxis['tickvals'] = list(drawing.ticks)

    if drawing.mapper is not None:
        x0, x1 = drawing.mapper.x.domain
        y0, y1 = drawing.mapper.y.domain
        xaxis['range'] = [x0, x1]
        yaxis['range'] = [y1, y0]
        yaxis.pop('autorange')

    fig.update_layout(
        xaxis=xaxis,
        yaxis=yaxis,
        plot_bgcolor='white',
        hovermode='closest' if configuration.show_tooltips else False,
    )
    if drawing.mapper is not None and min(
        drawing.mapper.width, drawing.mapper.height
    ) >= 10:
        fig.update_layout(
            width=drawing.mapper.width, height=drawing.mapper.height
        )

    for k, v in kwargs.items():
        if k == "layout":
            fig.update_layout(v)
        elif k == "traces":
            fig.update_traces(v)

    return fig
