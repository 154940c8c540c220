"""Hypothesis strategies for property-based testing."""

from hypothesis import strategies as st

from brollkit.models.task import TaskStatus

STOCK_HOSTS = ["videos.pexels.com", "www.pexels.com", "cdn.pixabay.com", "pixabay.com"]
OTHER_HOSTS = ["example.com", "cdn.kie.test", "localhost:5173"]

asset_ids = st.text(min_size=1, max_size=30, alphabet="abcdefghijklmnopqrstuvwxyz0123456789-_")
statuses = st.sampled_from(list(TaskStatus))


@st.composite
def generate_url(draw, hosts):
    host = draw(st.sampled_from(hosts))
    path = draw(st.text(min_size=1, max_size=20, alphabet="abcdefghijklmnopqrstuvwxyz0123456789_/"))
    return f"https://{host}/{path}.mp4"


def stock_urls():
    return generate_url(STOCK_HOSTS)


def other_urls():
    return generate_url(OTHER_HOSTS)


@st.composite
def generate_url_list(draw, max_size=8):
    """A mixed list of stock and non-stock URLs."""
    return draw(st.lists(st.one_of(stock_urls(), other_urls()), max_size=max_size))
