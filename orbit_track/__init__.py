"""
Orbit Track Package

Turns two-line element sets into propagated satellite positions and ground
tracks for a 3D globe renderer, using the sgp4 library as the integrator.

Modules:
    tle_parser: catalog text splitting, element set decoding, display elements
    propagator: SGP4 propagation with contained failures
    frames: inertial to Earth-fixed geodetic conversion
    track_sampler: orbital period ground track sampling
    live_feed: per-frame position callback for the renderer
    catalog_fetch: Space-Track / CelesTrak catalog retrieval
    catalog: per-session satellite, feed and track bookkeeping

References:
    Vallado, D. A., Crawford, P., Hujsak, R., & Kelso, T. S. (2006).
    Revisiting Spacetrack Report #3. AIAA 2006-6753.
"""

__version__ = "1.0.0"
