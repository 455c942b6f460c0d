"""Services Layer — orchestration of repositories, oracle and notifier around the pure core."""
