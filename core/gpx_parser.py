# core/gpx_parser.py
from typing import List, Optional
import logging
import gpxpy
import gpxpy.gpx
from model.track import TrackData, TrackDistance, TrackElevation, TrackPoint
from util.errors import TrackParseError
from util.timing import timed

logger = logging.getLogger(__name__)


def _elevation(track: gpxpy.gpx.GPXTrack) -> TrackElevation:
    elevations = [
        p.elevation
        for segment in track.segments
        for p in segment.points
        if p.elevation is not None
    ]
    if not elevations:
        return TrackElevation()
    up_down = track.get_uphill_downhill()
    return TrackElevation(
        max=max(elevations),
        min=min(elevations),
        pos=up_down.uphill,
        neg=up_down.downhill,
        avg=sum(elevations) / len(elevations),
    )


def _points(track: gpxpy.gpx.GPXTrack) -> List[TrackPoint]:
    return [
        TrackPoint(
            lat=p.latitude,
            lon=p.longitude,
            ele=p.elevation,
            time=p.time.isoformat() if p.time else None,
        )
        for segment in track.segments
        for p in segment.points
    ]


def _to_track_data(track: gpxpy.gpx.GPXTrack) -> TrackData:
    number: Optional[int] = None
    if track.number is not None:
        try:
            number = int(track.number)
        except (TypeError, ValueError):
            number = None
    return TrackData(
        name=track.name,
        comment=track.comment,
        description=track.description,
        type=track.type,
        number=number,
        points=_points(track),
        distance=TrackDistance(total=track.length_2d() or 0.0),
        elevation=_elevation(track),
    )


def parse_track(raw: bytes) -> List[TrackData]:
    """
    Parse GPX bytes into one TrackData per <trk>.
    Waypoints and routes are ignored. Raises TrackParseError on anything that
    is not decodable, well-formed GPX.
    """
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise TrackParseError("track is not valid UTF-8") from e

    with timed(logger, "gpx.parse", bytes=len(raw)):
        try:
            gpx = gpxpy.parse(text)
        except gpxpy.gpx.GPXException as e:
            raise TrackParseError(str(e)) from e
        tracks = [_to_track_data(t) for t in gpx.tracks]

    logger.debug("gpx.tracks count=%d", len(tracks))
    return tracks
