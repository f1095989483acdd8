class SemnullError(Exception):
    pass
