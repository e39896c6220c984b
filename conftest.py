pytest_plugins = ["signup_suite.plugin", "pytester"]
