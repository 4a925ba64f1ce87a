'''
examples/simple_example.py
--------------------------
A simple example of how to draw a wellbore schematic from a table of
trajectory and annotation rows, select some of the colored intervals with a
rectangle and render the drawing with plotly.
'''
import logging

import pandas as pd

import wellschematic as ws

ws.log.setup_logging(logging.DEBUG)

# a well kicking off at 300 m and building towards horizontal
df = pd.DataFrame([
    dict(layer_type='Trajectory', md=0., tvd=0., diameter=40.),
    dict(layer_type='Trajectory', md=300., tvd=300., diameter=40.),
    dict(layer_type='Trajectory', md=600., tvd=580., diameter=30.),
    dict(layer_type='Trajectory', md=900., tvd=780., diameter=30.),
    dict(layer_type='Trajectory', md=1200., tvd=850., diameter=20.),
    dict(layer_type='Value', md=100., value=1.2, color='lightblue'),
    dict(layer_type='Value', md=250., value=1.4, color='steelblue'),
    dict(layer_type='Value', md=400., value=1.1, color='lightblue'),
    dict(layer_type='Fill', md=280., color='lightgrey'),
    dict(layer_type='Plug', md=700.),
    dict(layer_type='Perforation', start_md=1000., end_md=1100.),
    dict(layer_type='Gun', md=1150.),
])

print("Drawing the schematic...")
diagram = ws.diagram.WellboreDiagram()
drawing = diagram.draw(df, width=600, height=800)

for shape in drawing.shapes:
    print(f"{shape.kind:<12} {len(shape.points):>4} points")

# select whatever is drawn in the top half of the surface
rows = diagram.rectangle_selection(
    {'x': 0, 'y': 0, 'width': 600, 'height': 400}
)
print(f"Selected rows: {rows}")

fig = ws.visual.figure(drawing)
fig.show()

print("Done!")
