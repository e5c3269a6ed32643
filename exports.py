# exports.py
from io import BytesIO

import pandas as pd
from simplekml import AltitudeMode, Kml


def path_to_dataframe(path):
    df = pd.DataFrame(path, columns=["longitude", "latitude"])
    df.insert(0, "waypoint", range(1, len(df) + 1))
    return df


def path_to_csv(path):
    return path_to_dataframe(path).to_csv(index=False).encode("utf-8")


def path_to_kmz(path, name="Flight Path", altitude=None):
    """KMZ with a placemark per waypoint and the connecting line."""
    kml = Kml(name=name)

    def coord(lon, lat):
        return (lon, lat, altitude) if altitude is not None else (lon, lat)

    for i, (lon, lat) in enumerate(path, start=1):
        kml.newpoint(name=f"WP{i}", coords=[coord(lon, lat)])

    line = kml.newlinestring(name=name, coords=[coord(lon, lat) for lon, lat in path])
    if altitude is not None:
        line.altitudemode = AltitudeMode.relativetoground

    kmz_buff = BytesIO()
    kml.savekmz(kmz_buff)
    return kmz_buff.getvalue()
