def match_payload(**overrides):
    """Request body for a valid match, with any field overridable."""
    data = {
        'weight_category': '-68kg',
        'red_competitor_name': 'Lee Dae-hoon',
        'red_competitor_country': 'KOR',
        'blue_competitor_name': 'Bradly Sinden',
        'blue_competitor_country': 'GBR',
    }
    data.update(overrides)
    return data
