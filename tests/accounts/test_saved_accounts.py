from datetime import date

from src.academy_system.academy_system.accounts.saved_accounts import SavedAccounts


def test_remember_puts_latest_first_without_duplicates():
    store = {}
    saved = SavedAccounts(store)
    saved.remember(code="P-1", full_name="A", user_type="player")
    saved.remember(code="T-1", full_name="B", user_type="trainer")
    saved.remember(code="P-1", full_name="A", user_type="player")

    assert [a.code for a in saved.list()] == ["P-1", "T-1"]


def test_remember_keeps_at_most_five():
    saved = SavedAccounts({})
    for i in range(7):
        saved.remember(code=f"P-{i}", full_name=str(i), user_type="player")

    assert [a.code for a in saved.list()] == ["P-6", "P-5", "P-4", "P-3", "P-2"]


def test_remove_and_find():
    saved = SavedAccounts({})
    saved.remember(code="S-1", full_name="Lina", user_type="student")

    assert saved.find("S-1").full_name == "Lina"
    assert saved.remove("S-1") is True
    assert saved.remove("S-1") is False
    assert saved.find("S-1") is None


def test_only_todays_login_is_kept():
    store = {}
    saved = SavedAccounts(store)
    saved.set_today_login(code="P-1", full_name="A", user_type="player", on=date(2026, 3, 1))
    saved.set_today_login(code="T-1", full_name="B", user_type="trainer", on=date(2026, 3, 2))

    assert saved.today_login(date(2026, 3, 1)) is None
    assert saved.today_login(date(2026, 3, 2))["code"] == "T-1"
    assert [k for k in store if k.startswith("todayLogin_")] == ["todayLogin_2026-03-02"]
