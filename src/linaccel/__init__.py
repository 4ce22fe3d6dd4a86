"""LinAccel: live linear-acceleration gauge and sensor rate monitor.

The package is split the same way the data flows:
- :mod:`linaccel.core` owns sample models, sensor feeds, and the session that
  ties a feed to the estimator and the gauge transform.
- :mod:`linaccel.analysis` holds the numeric pieces (rate estimation and the
  vector gauge math) with no Qt or I/O dependencies.
- :mod:`linaccel.config` loads/saves preferences and runtime knobs (YAML).
- :mod:`linaccel.gui` and :mod:`linaccel.tools` are the rendering and
  command-line front ends.
"""

__version__ = "0.3.0"
