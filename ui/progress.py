"""Progress tracking"""

from abc import ABC, abstractmethod


class ProgressTracker(ABC):
    """Abstract progress tracker. Purely observational."""
    
    @abstractmethod
    def start_stage(self, stage_num: int, stage_name: str, percent: int):
        """Start a stage"""
        pass
    
    @abstractmethod
    def complete_stage(self, stage_num: int):
        """Complete a stage"""
        pass
    
    @abstractmethod
    def fail(self, stage_num: int, message: str):
        """Mark stage as failed"""
        pass
    
    @abstractmethod
    def complete(self):
        """Mark pipeline as complete"""
        pass


class ConsoleProgress(ProgressTracker):
    """Console-based progress tracker"""
    
    def __init__(self):
        self.stages = {
            0: "Expand Data Package",
            1: "Inspect Package",
            2: "Check Versions",
            3: "Complete Reports",
            4: "Generate Recommendations",
            5: "Stage Deliverables",
        }
    
    def start_stage(self, stage_num: int, stage_name: str, percent: int):
        """Start a stage"""
        print(f"[◉] {percent:3d}% Stage {stage_num}: {stage_name}...")
    
    def complete_stage(self, stage_num: int):
        """Complete a stage"""
        print(f"[✓] Stage {stage_num}: {self.stages.get(stage_num, 'Unknown')} complete")
    
    def fail(self, stage_num: int, message: str):
        """Mark stage as failed"""
        print(f"[✗] Stage {stage_num}: {self.stages.get(stage_num, 'Unknown')} failed - {message}")
    
    def complete(self):
        """Mark pipeline as complete"""
        print("\n[✓] 100% Assessment package complete!")
