#!/usr/bin/env python3
"""
Lookup tables for RDS/RBDS group decoding.

- PTY names for RDS (Europe) and RBDS (North America)
- RDS extended character set (codes 0x80-0xFF)
- Open Data Application ids (group 3A)
- RadioText+ content types
- Group type descriptions
"""


# RDS (IEC 62106) programme type names
PTY_NAMES_RDS = {
    0: "None", 1: "News", 2: "Current Affairs", 3: "Info",
    4: "Sport", 5: "Education", 6: "Drama", 7: "Culture",
    8: "Science", 9: "Varied", 10: "Pop M", 11: "Rock M",
    12: "Easy Listening", 13: "Light Classical", 14: "Serious Classical", 15: "Other Music",
    16: "Weather", 17: "Finance", 18: "Children's", 19: "Social Affairs",
    20: "Religion", 21: "Phone-in", 22: "Travel", 23: "Leisure",
    24: "Jazz Music", 25: "Country Music", 26: "National Music", 27: "Oldies Music",
    28: "Folk Music", 29: "Documentary", 30: "Alarm Test", 31: "Alarm",
}

# RBDS (North America) programme type names
PTY_NAMES_RBDS = {
    0: "None", 1: "News", 2: "Information", 3: "Sports",
    4: "Talk", 5: "Rock", 6: "Classic Rock", 7: "Adult Hits",
    8: "Soft Rock", 9: "Top 40", 10: "Country", 11: "Oldies",
    12: "Soft", 13: "Nostalgia", 14: "Jazz", 15: "Classical",
    16: "R&B", 17: "Soft R&B", 18: "Language", 19: "Religious Music",
    20: "Religious Talk", 21: "Personality", 22: "Public", 23: "College",
    24: "Spanish Talk", 25: "Spanish Music", 26: "Hip Hop",
    27: "Unassigned", 28: "Unassigned", 29: "Weather",
    30: "Emergency Test", 31: "Emergency",
}


# RDS G0 code table, upper half (IEC 62106 Annex E)
RDS_CHARSET = {
    0x80: 'á', 0x81: 'à', 0x82: 'é', 0x83: 'è', 0x84: 'í', 0x85: 'ì', 0x86: 'ó', 0x87: 'ò',
    0x88: 'ú', 0x89: 'ù', 0x8A: 'Ñ', 0x8B: 'Ç', 0x8C: 'Ş', 0x8D: 'ß', 0x8E: '¡', 0x8F: 'Ĳ',
    0x90: 'â', 0x91: 'ä', 0x92: 'ê', 0x93: 'ë', 0x94: 'î', 0x95: 'ï', 0x96: 'ô', 0x97: 'ö',
    0x98: 'û', 0x99: 'ü', 0x9A: 'ñ', 0x9B: 'ç', 0x9C: 'ş', 0x9D: 'ğ', 0x9E: 'ı', 0x9F: 'ĳ',
    0xA0: 'ª', 0xA1: 'α', 0xA2: '©', 0xA3: '‰', 0xA4: 'Ğ', 0xA5: 'ě', 0xA6: 'Ň', 0xA7: 'ő',
    0xA8: 'π', 0xA9: '€', 0xAA: '£', 0xAB: '$', 0xAC: '←', 0xAD: '↑', 0xAE: '→', 0xAF: '↓',
    0xB0: '⁰', 0xB1: '¹', 0xB2: '²', 0xB3: '³', 0xB4: '±', 0xB5: 'İ', 0xB6: 'ń', 0xB7: 'ű',
    0xB8: 'μ', 0xB9: '¿', 0xBA: '÷', 0xBB: '°', 0xBC: '¼', 0xBD: '½', 0xBE: '¾', 0xBF: '§',
    0xC0: 'Á', 0xC1: 'À', 0xC2: 'É', 0xC3: 'È', 0xC4: 'Í', 0xC5: 'Ì', 0xC6: 'Ó', 0xC7: 'Ò',
    0xC8: 'Ú', 0xC9: 'Ù', 0xCA: 'Ř', 0xCB: 'Č', 0xCC: 'Š', 0xCD: 'Ž', 0xCE: 'Đ', 0xCF: 'Ŀ',
    0xD0: 'Â', 0xD1: 'Ä', 0xD2: 'Ê', 0xD3: 'Ë', 0xD4: 'Î', 0xD5: 'Ï', 0xD6: 'Ô', 0xD7: 'Ö',
    0xD8: 'Û', 0xD9: 'Ü', 0xDA: 'ř', 0xDB: 'č', 0xDC: 'š', 0xDD: 'ž', 0xDE: 'đ', 0xDF: 'ŀ',
    0xE0: 'Ã', 0xE1: 'Å', 0xE2: 'Æ', 0xE3: 'Œ', 0xE4: 'ŷ', 0xE5: 'Ý', 0xE6: 'Õ', 0xE7: 'Ø',
    0xE8: 'Þ', 0xE9: 'Ŋ', 0xEA: 'Ŕ', 0xEB: 'Ć', 0xEC: 'Ś', 0xED: 'Ź', 0xEE: 'Ŧ', 0xEF: 'ð',
    0xF0: 'ã', 0xF1: 'å', 0xF2: 'æ', 0xF3: 'œ', 0xF4: 'ŵ', 0xF5: 'ý', 0xF6: 'õ', 0xF7: 'ø',
    0xF8: 'þ', 0xF9: 'ŋ', 0xFA: 'ŕ', 0xFB: 'ć', 0xFC: 'ś', 0xFD: 'ź', 0xFE: 'ŧ', 0xFF: 'ÿ',
}


def rds_char(code, keep_controls=False):
    """
    Map one 8-bit RDS character code to a printable character.

    Control codes below 0x20 render as '?' unless keep_controls is set,
    in which case they are returned as-is for the caller to strip.
    """
    if 0x20 <= code <= 0x7F:
        return chr(code)
    if keep_controls and code < 0x20:
        return chr(code)
    return RDS_CHARSET.get(code, '?')


ODA_RTPLUS = 0x4BD7
ODA_RTPLUS_ERT = 0x4BD8
ODA_TMC = 0xCD46

RTPLUS_AIDS = (ODA_RTPLUS, ODA_RTPLUS_ERT)
TMC_AIDS = (ODA_TMC, 0xCD47, 0x0D45)

UNKNOWN_ODA = "Unknown ODA"

# Registered ODA application ids (RDS Forum / NRSC lists)
ODA_AIDS = {
    0x4BD7: "RadioText+ (RT+)",
    0x4BD8: "RadioText+ for eRT",
    0xCD46: "TMC (ALERT-C)",
    0xCD47: "TMC (ALERT-C, arbitrary PICC)",
    0x0D45: "TMC (ALERT-C test)",
    0xE911: "EAS open protocol",
    0x0093: "DAB cross-referencing",
    0x5757: "Personal weather station",
    0x6365: "RDS2 9-bit AF lists",
    0x6552: "Enhanced RadioText (eRT)",
    0x6A7A: "Warning receiver (Sweden)",
    0x7373: "Enhanced early warning system (EWS)",
    0xC3B0: "iTunes tagging",
    0xC350: "NRSC song title and artist",
    0xC4D4: "eEAS",
    0xC737: "Utility message channel (UMC)",
    0xE123: "APS gateway",
    0x125F: "I-FM-RDS for fixed and mobile devices",
    0x1C68: "ITIS in-vehicle database",
    0x4400: "RDS-Light",
    0x50DD: "Disaster warning",
    0xA112: "NL-Alert",
    0xA911: "Data FM selective multipoint",
    0x4AA1: "RASANT",
    0x0BCB: "Leisure and practical info for drivers",
    0xCE6B: "Encrypted TTI ALERT-Plus",
    0x4D87: "Radio commerce system (RCS)",
    0x0CC1: "Wireless playground broadcast control",
    0x6363: "Hybradio RDS-Net",
    0xABCF: "RF power monitoring",
    0xFF7F: "RFT station logo",
    0xFF80: "RFT+",
    0xC563: "ID Logic",
    0xC3C3: "NAVTEQ Traffic Plus",
    0xC3A1: "CEA personal radio service",
}


def oda_name(aid):
    return ODA_AIDS.get(aid, UNKNOWN_ODA)


# RadioText+ content types (ETSI TS 102 980 Annex A)
RTPLUS_TAGS = [
    'DUMMY_CLASS', 'ITEM.TITLE', 'ITEM.ALBUM', 'ITEM.TRACKNUMBER',
    'ITEM.ARTIST', 'ITEM.COMPOSITION', 'ITEM.MOVEMENT', 'ITEM.CONDUCTOR',
    'ITEM.COMPOSER', 'ITEM.BAND', 'ITEM.COMMENT', 'ITEM.GENRE',
    'INFO.NEWS', 'INFO.NEWS.LOCAL', 'INFO.STOCKMARKET', 'INFO.SPORT',
    'INFO.LOTTERY', 'INFO.HOROSCOPE', 'INFO.DAILY_DIVERSION', 'INFO.HEALTH',
    'INFO.EVENT', 'INFO.SCENE', 'INFO.CINEMA', 'INFO.STUPIDITY.MACHINE',
    'INFO.DATE_TIME', 'INFO.WEATHER', 'INFO.TRAFFIC', 'INFO.ALARM',
    'INFO.ADVERTISEMENT', 'INFO.URL', 'INFO.OTHER', 'STATIONNAME.SHORT',
    'STATIONNAME.LONG', 'PROGRAMME.NOW', 'PROGRAMME.NEXT', 'PROGRAMME.PART',
    'PROGRAMME.HOST', 'PROGRAMME.EDITORIAL_STAFF', 'PROGRAMME.FREQUENCY', 'PROGRAMME.HOMEPAGE',
    'PROGRAMME.SUBCHANNEL', 'PHONE.HOTLINE', 'PHONE.STUDIO', 'PHONE.OTHER',
    'SMS.STUDIO', 'SMS.OTHER', 'EMAIL.HOTLINE', 'EMAIL.STUDIO',
    'EMAIL.OTHER', 'MMS.OTHER', 'CHAT', 'CHAT.CENTRE',
    'VOTE.QUESTION', 'VOTE.CENTRE', 'RFU_54', 'RFU_55',
    'PRIVATE_56', 'PRIVATE_57', 'PRIVATE_58', 'PLACE',
    'APPOINTMENT', 'IDENTIFIER', 'PURCHASE', 'GET_DATA',
]


def rtplus_tag_name(content_type):
    if 0 <= content_type < len(RTPLUS_TAGS):
        return RTPLUS_TAGS[content_type]
    return f'UNKNOWN_{content_type}'


# Group descriptions, keyed by label ('0A', '14B', ...)
GROUP_DESCRIPTIONS = {
    '0A': 'Basic tuning and AF',
    '0B': 'Basic tuning',
    '1A': 'Programme item number and slow labelling',
    '1B': 'Programme item number',
    '2A': 'RadioText (64 chars)',
    '2B': 'RadioText (32 chars)',
    '3A': 'ODA application id',
    '4A': 'Clock time and date',
    '5A': 'Transparent data channel / ODA',
    '5B': 'Transparent data channel / ODA',
    '6A': 'In-house / ODA',
    '6B': 'In-house / ODA',
    '7A': 'Radio paging / ODA',
    '8A': 'Traffic message channel',
    '9A': 'Emergency warning / ODA',
    '10A': 'Programme type name',
    '11A': 'ODA',
    '12A': 'ODA',
    '13A': 'Enhanced radio paging / ODA',
    '14A': 'Enhanced other networks',
    '14B': 'Enhanced other networks (TA)',
    '15A': 'Long PS',
    '15B': 'Fast basic tuning',
}
