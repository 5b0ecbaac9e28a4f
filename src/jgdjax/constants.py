"""
The `constants` module defines the angular units and mesh geometry used by the datum corrections.
"""

# Angular units

"""
Arc-seconds per degree. Units: *as/deg*
"""
DEG2AS = 3600.0

"""
Degrees per arc-second. Units: *deg/as*
"""
AS2DEG = 1.0 / 3600.0

"""
Fixed-point units per arc-second. Correction parameters are published with
five decimal places, so one unit is 1e-5 arc-second (about 0.3 mm).
"""
FIXED_PER_AS = 100_000

"""
Fixed-point units per degree. Units: *1e-5 as/deg*
"""
FIXED_PER_DEG = 360_000_000

# Mesh geometry (JIS X 0410 third-level mesh)

"""
Latitude extent of a third-level mesh cell. Units: *as*
"""
MESH3_LAT_AS = 30

"""
Longitude extent of a third-level mesh cell. Units: *as*
"""
MESH3_LON_AS = 45

"""
Latitude extent of a third-level mesh cell in fixed-point units.
"""
MESH3_LAT_FIXED = MESH3_LAT_AS * FIXED_PER_AS

"""
Longitude extent of a third-level mesh cell in fixed-point units.
"""
MESH3_LON_FIXED = MESH3_LON_AS * FIXED_PER_AS

"""
Third-level cells per degree of latitude (3600 / 30).
"""
MESH3_PER_LAT_DEG = 120

"""
Third-level cells per degree of longitude (3600 / 45).
"""
MESH3_PER_LON_DEG = 80

"""
Third-level cells per first-level cell along each axis (8 x 10).
"""
MESH3_PER_MESH1 = 80

"""
Longitude subtracted from the first-level longitude digits. Units: *deg*
"""
MESH1_LON_ORIGIN = 100
