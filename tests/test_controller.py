from sampleparquet.navigation.controller import NavigationController
from sampleparquet.navigation.gate import GateState
from sampleparquet.navigation.history import MemoryHistory
from sampleparquet.navigation.session import AdminSession, SessionStore
from sampleparquet.navigation.views import View


def make(url="/", base_path="/"):
    history = MemoryHistory(url)
    store = SessionStore()
    nav = NavigationController(history, store, base_path=base_path)
    return history, store, nav


def test_initial_path_comes_from_location():
    history, store, nav = make("/ozanparquet/gallery", base_path="/ozanparquet/")
    decision = nav.start()
    assert nav.current_path == "/gallery"
    assert decision.view is View.GALLERY


def test_redirect_marker_is_consumed_once():
    history, store, nav = make("/ozanparquet/", base_path="/ozanparquet/")
    storage = {"redirect": "http://localhost/ozanparquet/blog/oak-care"}

    decision = nav.start(storage)

    assert "redirect" not in storage
    assert history.location == "/ozanparquet/blog/oak-care"
    assert history.length == 1
    assert nav.current_path == "/blog/oak-care"
    assert decision.resolution.slug == "oak-care"


def test_link_activation_navigates_in_place():
    history, store, nav = make("/")
    nav.start()

    assert nav.handle_link("http://localhost/about") is True

    assert nav.current_path == "/about"
    assert nav.decision.view is View.ABOUT
    assert history.length == 2
    assert history.document_loads == 1


def test_external_or_targeted_links_are_left_alone():
    history, store, nav = make("/")
    nav.start()

    assert nav.handle_link("https://example.com/about") is False
    assert nav.handle_link("/about", target="_blank") is False
    assert nav.current_path == "/"
    assert history.length == 1


def test_fragment_link_keeps_the_current_view():
    history, store, nav = make("/products/oak-8mm")
    nav.start()

    assert nav.handle_link("#reviews") is False

    assert nav.current_path == "/products/oak-8mm"
    assert nav.decision.view is View.PRODUCT_DETAIL
    assert history.length == 1


def test_relative_links_resolve_against_current_location():
    history, store, nav = make("/products/oak-8mm")
    nav.start()

    assert nav.handle_link("?color=dark") is True
    assert nav.current_path == "/products/oak-8mm"
    assert nav.decision.resolution.slug == "oak-8mm"

    assert nav.handle_link("walnut-10mm") is True
    assert nav.current_path == "/products/walnut-10mm"
    assert nav.decision.resolution.slug == "walnut-10mm"

    assert nav.handle_link("../about") is True
    assert nav.current_path == "/about"
    assert history.length == 4
    assert history.document_loads == 1


def test_back_restores_path_and_scroll():
    history, store, nav = make("/")
    nav.start()
    nav.navigate("/about")
    history.scroll_to(0, 900)

    history.back()

    assert nav.current_path == "/"
    assert nav.decision.view is View.HOME
    assert history.scroll_y == 0

    history.forward()
    assert nav.current_path == "/about"


def test_navigate_adds_base_path_to_history():
    history, store, nav = make("/ozanparquet/", base_path="/ozanparquet/")
    nav.start()
    nav.navigate("/products/oak-8mm")
    assert history.location == "/ozanparquet/products/oak-8mm"
    assert nav.decision.resolution.slug == "oak-8mm"


def test_listeners_see_every_decision():
    history, store, nav = make("/")
    seen = []
    nav.subscribe(lambda d: seen.append(d.view))
    nav.start()
    nav.navigate("/faq")
    nav.navigate("/contact")
    assert seen == [View.HOME, View.FAQ, View.CONTACT]


def test_admin_checking_then_redirect_when_anonymous():
    history, store, nav = make("/admin/products")
    decision = nav.start()
    assert decision.state is GateState.CHECKING
    assert history.location == "/admin/products"

    store.resolve(None)

    assert nav.decision.state is GateState.DENIED
    assert nav.decision.view is View.ADMIN_LOGIN
    assert nav.current_path == "/admin/login"
    assert history.location == "/admin/login"
    assert history.document_loads == 1


def test_admin_granted_once_session_resolves():
    history, store, nav = make("/admin/categories")
    nav.start()
    store.resolve(AdminSession(id=1, email="admin@test.com"))
    assert nav.decision.state is GateState.GRANTED
    assert nav.decision.view is View.ADMIN_CATEGORIES
    assert history.location == "/admin/categories"


def test_reading_decision_does_not_touch_history():
    history, store, nav = make("/admin/products")
    store.resolve(None)
    nav.start()
    length = history.length
    for _ in range(3):
        assert nav.decision.view is View.ADMIN_LOGIN
    assert history.length == length


def test_stop_detaches_from_history_and_session():
    history, store, nav = make("/")
    nav.start()
    nav.navigate("/about")
    nav.stop()

    history.back()
    store.resolve(None)
    assert nav.current_path == "/about"
