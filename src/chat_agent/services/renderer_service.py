import os


def render_prompt(name: str = "system_prompt") -> str:
    # Prompts live in ../prompts/<name>.md relative to this file
    current_dir = os.path.dirname(os.path.abspath(__file__))
    prompt_path = os.path.join(current_dir, "..", "prompts", f"{name}.md")
    with open(prompt_path, encoding="utf-8") as f:
        return f.read()
