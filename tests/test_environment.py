# tests/test_environment.py
from sysinventory.modules.environment import ALLOWED_VARIABLES, collect_environment


def test_only_allow_listed_variables_are_collected():
    environ = {
        "USERNAME": "jdoe",
        "COMPUTERNAME": "WS-01",
        "PATH": r"C:\Windows\system32;C:\Windows",
        "AWS_SECRET_ACCESS_KEY": "do-not-print",
        "GITHUB_TOKEN": "ghp_example",
    }
    variables = collect_environment(environ)

    assert [v.name for v in variables] == list(ALLOWED_VARIABLES)
    assert all("do-not-print" != v.value for v in variables)
    assert {v.name for v in variables}.isdisjoint({"AWS_SECRET_ACCESS_KEY", "GITHUB_TOKEN"})


def test_unset_variables_have_no_value():
    variables = {v.name: v.value for v in collect_environment({"USERNAME": "jdoe"})}
    assert variables["USERNAME"] == "jdoe"
    assert variables["LOGONSERVER"] is None
