"""Crossref query compiler."""

from __future__ import annotations

from SourceFinder.core.query import AUTHOR, JOURNAL, PUBLISHER, TITLE, YEAR, SearchRequest, parse_year

_FIELD_TO_PARAM: dict[str, str] = {
    TITLE: "query.bibliographic",
    AUTHOR: "query.author",
    PUBLISHER: "query.publisher-name",
    JOURNAL: "query.container-title",
}


def compile_crossref_params(request: SearchRequest) -> dict[str, str]:
    """Compile a search request into Crossref ``/works`` parameters.

    Fields without a dedicated Crossref parameter fall back to the general
    ``query`` parameter. A year query becomes a publication-date filter when a
    year can be read from it.
    """
    params = {
        "rows": str(request.max_results),
        "offset": str(request.offset),
    }

    if request.field == YEAR:
        year = parse_year(request.query)
        if year is not None:
            params["filter"] = f"from-pub-date:{year},until-pub-date:{year}"
            return params

    param_key = _FIELD_TO_PARAM.get(request.field, "query")
    params[param_key] = request.query.strip()
    return params
