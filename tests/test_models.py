from app.models import Collection, MovieDetails, SearchHit, TrailerLookup


def test_search_hit_prefers_name_over_title():
    hit = SearchHit.model_validate(
        {"id": 2344, "name": "The Matrix Collection", "media_type": "collection"}
    )
    assert hit.title == "The Matrix Collection"
    assert hit.is_collection

    movie = SearchHit.model_validate({"id": 603, "title": "The Matrix"})
    assert movie.title == "The Matrix"
    assert movie.media_type == "movie"
    assert not movie.is_collection


def test_collection_accepts_null_parts():
    collection = Collection.model_validate({"id": 9485, "name": "Fast", "parts": None})
    assert collection.parts == []


def test_movie_details_reads_region_providers():
    movie = MovieDetails.model_validate(
        {
            "id": 603,
            "title": "The Matrix",
            "watch/providers": {
                "results": {
                    "DE": {
                        "flatrate": [{"provider_name": "Netflix"}],
                        "rent": None,
                    }
                }
            },
        }
    )

    offers = movie.providers_for("DE")
    assert offers is not None
    assert [p.provider_name for p in offers.flatrate] == ["Netflix"]
    assert offers.rent == []
    assert movie.providers_for("US") is None


def test_find_trailer_key_requires_type_and_site():
    movie = MovieDetails.model_validate(
        {
            "id": 603,
            "videos": {
                "results": [
                    {"type": "Teaser", "site": "YouTube", "key": "teaser"},
                    {"type": "Trailer", "site": "Vimeo", "key": "vimeo"},
                    {"type": "Trailer", "site": "YouTube", "key": "abc123"},
                    {"type": "Trailer", "site": "YouTube", "key": "later"},
                ]
            },
        }
    )

    assert movie.find_trailer_key("YouTube") == "abc123"
    assert MovieDetails(id=1).find_trailer_key("YouTube") is None


def test_trailer_lookup_alias():
    assert TrailerLookup.model_validate({"trailerKey": "k1"}).trailer_key == "k1"
    assert TrailerLookup.model_validate({}).trailer_key is None
