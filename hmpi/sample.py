"""Sample site table (mg/L) for trying the calculator."""
import io

import pandas as pd

SAMPLE_CSV = """Site, Latitude, Longitude, Pb, Cd, Cr, Ni, Zn, Cu
Site A, 21.1458, 79.0882, 0.015, 0.002, 0.03, 0.01, 1.2, 0.3
Site B, 19.0760, 72.8777, 0.005, 0.001, 0.07, 0.02, 3.4, 0.8
Site C, 28.7041, 77.1025, 0.02, 0.004, 0.1, 0.05, 4.0, 1.5
Site D, 13.0827, 80.2707, 0.008, 0.0005, 0.02, 0.015, 0.6, 0.2
Site E, 22.5726, 88.3639, 0.03, 0.006, 0.2, 0.04, 6.0, 2.0
"""

SITE_COLUMN = "Site"
LAT_COLUMN = "Latitude"
LON_COLUMN = "Longitude"


def load_sample_df() -> pd.DataFrame:
    return pd.read_csv(io.StringIO(SAMPLE_CSV), skipinitialspace=True)
