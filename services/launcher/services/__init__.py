from .script_runner import LaunchEvent, LaunchResult, LaunchStream, ScriptLauncher

__all__ = ["LaunchEvent", "LaunchResult", "LaunchStream", "ScriptLauncher"]
