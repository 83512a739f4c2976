"""Draft editing: state manager, autosave timer and wizard navigation."""
from resumint.drafts.manager import DraftManager, SaveState
from resumint.drafts.scheduler import DebouncedTask
from resumint.drafts.wizard import RESUME_STEPS, ResumeWizard, Step

__all__ = ["DebouncedTask", "DraftManager", "RESUME_STEPS", "ResumeWizard", "SaveState", "Step"]
