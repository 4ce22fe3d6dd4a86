"""Desktop GUI implementation built with PySide6/Qt.

:mod:`vector_view` draws the acceleration gauge, :mod:`plot_widget` the
rolling per-axis plot, and :mod:`settings_dialog` the frequency tier picker
with its live rate readout. This layer only renders; sampling, estimation and
geometry live in :mod:`linaccel.core` and :mod:`linaccel.analysis`.
"""
