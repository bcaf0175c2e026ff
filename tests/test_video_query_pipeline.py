import pytest
from bson import ObjectId

from app.core.errors import InvalidArgument
from app.domain.models.listing import ListingQuery
from app.services import video_query as vq

from fakes import ALICE_ID


def _ops(pipeline):
    return [next(iter(stage)) for stage in pipeline]


# ========= validação =========

@pytest.mark.parametrize("sort_by", ["ASC", "descending", "", "up"])
def test_invalid_sort_direction(sort_by):
    with pytest.raises(InvalidArgument) as ex:
        vq.build_pipelines(ListingQuery(sort_by=sort_by))
    assert ex.value.message == "sortBy must be either 'asc' or 'desc'"


@pytest.mark.parametrize("sort_type", ["likes", "Date", "", "createdAt"])
def test_invalid_sort_type(sort_type):
    with pytest.raises(InvalidArgument) as ex:
        vq.build_pipelines(ListingQuery(sort_type=sort_type))
    assert ex.value.message == "sortType must be either 'date' or 'views'"


@pytest.mark.parametrize("user_id", ["123", "not-an-object-id", "zz" * 12])
def test_malformed_user_id(user_id):
    with pytest.raises(InvalidArgument) as ex:
        vq.build_pipelines(ListingQuery(user_id=user_id))
    assert ex.value.message == "Invalid user ID format"


# ========= ordem e forma dos estágios =========

def test_stage_order_without_filters():
    data, count = vq.build_pipelines(ListingQuery())
    assert _ops(data) == ["$lookup", "$addFields", "$sort", "$project", "$skip", "$limit"]
    assert _ops(count) == ["$lookup", "$addFields", "$sort", "$project", "$count"]
    assert data[2] == count[2] == {"$sort": {"createdAt": -1, "_id": -1}}


def test_stage_order_with_filters():
    data, count = vq.build_pipelines(ListingQuery(query="cat", user_id=str(ALICE_ID)))
    assert _ops(data)[0] == "$match"
    assert _ops(count)[0] == "$match"


def test_count_and_data_share_every_stage_but_the_tail():
    q = ListingQuery(page=3, limit=7, query=" Cats ", sort_by="asc", sort_type="views", user_id=str(ALICE_ID))
    data, count = vq.build_pipelines(q)
    assert data[:-2] == count[:-1]
    assert data[-2:] == [{"$skip": 14}, {"$limit": 7}]
    assert count[-1] == {"$count": "totalVideos"}


def test_match_owner_only_uses_object_id():
    stage = vq.match_stage(ListingQuery(user_id=str(ALICE_ID)))
    assert stage == {"$match": {"owner": ALICE_ID}}
    assert isinstance(stage["$match"]["owner"], ObjectId)


def test_match_text_is_trimmed_and_case_insensitive():
    stage = vq.match_stage(ListingQuery(query="  alpha  "))
    pattern = {"$regex": "alpha", "$options": "i"}
    assert stage == {"$match": {"$or": [{"title": pattern}, {"description": pattern}]}}


def test_match_owner_and_text_are_combined():
    stage = vq.match_stage(ListingQuery(query="alpha", user_id=str(ALICE_ID)))
    cond = stage["$match"]
    assert cond["owner"] == ALICE_ID
    assert [list(c) for c in cond["$or"]] == [["title"], ["description"]]


@pytest.mark.parametrize("text", [None, "", "   ", "\t\n"])
def test_blank_text_is_ignored(text):
    assert vq.match_stage(ListingQuery(query=text)) is None


def test_regex_metacharacters_are_escaped():
    stage = vq.match_stage(ListingQuery(query="c++ (part 1)"))
    assert stage["$match"]["$or"][0]["title"]["$regex"] == r"c\+\+\ \(part\ 1\)"


def test_owner_lookup_is_projected_and_collapsed():
    lookup, add_fields = vq.owner_stages()
    assert lookup["$lookup"]["from"] == "users"
    assert lookup["$lookup"]["localField"] == "owner"
    assert lookup["$lookup"]["foreignField"] == "_id"
    assert lookup["$lookup"]["pipeline"] == [{"$project": {"username": 1, "fullname": 1, "avatar": 1}}]
    assert add_fields == {"$addFields": {"owner": {"$first": "$ownerDetails"}}}


@pytest.mark.parametrize(
    "sort_by,sort_type,expected",
    [
        ("asc", "date", {"createdAt": 1, "_id": 1}),
        ("desc", "date", {"createdAt": -1, "_id": -1}),
        ("asc", "views", {"views": 1, "_id": 1}),
        ("desc", "views", {"views": -1, "_id": -1}),
    ],
)
def test_sort_mapping(sort_by, sort_type, expected):
    data, _ = vq.build_pipelines(ListingQuery(sort_by=sort_by, sort_type=sort_type))
    assert {"$sort": expected} in data


def test_sort_breaks_ties_by_id_in_both_pipelines():
    data, count = vq.build_pipelines(ListingQuery(sort_type="views"))
    sort = next(s["$sort"] for s in data if "$sort" in s)
    # a ordem das chaves importa: _id só desempata
    assert list(sort) == ["views", "_id"]
    assert {"$sort": sort} in count


def test_projection_drops_internal_fields():
    project = vq.project_stage()["$project"]
    assert set(project) == {
        "title", "description", "videoFile", "thumbnail", "duration",
        "views", "isPublished", "createdAt", "updatedAt", "owner",
    }
    assert "ownerDetails" not in project


@pytest.mark.parametrize("page,limit,skip", [(1, 10, 0), (2, 10, 10), (5, 3, 12), (1, 1, 0)])
def test_skip_formula(page, limit, skip):
    data, _ = vq.build_pipelines(ListingQuery(page=page, limit=limit))
    assert data[-2:] == [{"$skip": skip}, {"$limit": limit}]


def test_by_id_pipeline_reuses_owner_enrichment():
    vid = ObjectId()
    pipeline = vq.by_id_pipeline(str(vid))
    assert pipeline[0] == {"$match": {"_id": vid}}
    assert pipeline[1:3] == vq.owner_stages()
    assert pipeline[-1] == {"$limit": 1}


# ========= paginação =========

@pytest.mark.parametrize(
    "page,limit,total,pages,prev,nxt",
    [
        (1, 10, 0, 0, False, False),
        (1, 10, 10, 1, False, False),
        (1, 10, 11, 2, False, True),
        (2, 10, 11, 2, True, False),
        (2, 3, 10, 4, True, True),
    ],
)
def test_build_pagination(page, limit, total, pages, prev, nxt):
    p = vq.build_pagination(page, limit, total)
    assert p.currentPage == page
    assert p.totalVideos == total
    assert p.totalPages == pages
    assert p.hasPrevPage is prev
    assert p.hasNextPage is nxt
