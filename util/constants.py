class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    USERS = V1 + "/users"
    REGISTER = USERS + "/register"
    LOGIN = USERS + "/login"
    LOGOUT = USERS + "/logout"
    ME = USERS + "/me"
    TRACKS = V1 + "/tracks"
    TRACK_COUNT = TRACKS + "/count"
    TRACK_BY_INDEX = TRACKS + "/{index}"
    TRACK_BY_ID = TRACKS + "/by-id/{track_id}"
    TRACK_DOWNLOAD = TRACKS + "/{file_name}/download"
    TRACK_DELETE = TRACKS + "/{file_name}"


GPX_MEDIA_TYPE = "application/gpx+xml"
