from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class EmojiTemplate:
    key: str    # stable identifier, ascii
    label: str  # caption shown to the user


# Row-major order of the 4x6 sheet the generator is prompted with.
EMOJI_LABELS: List[EmojiTemplate] = [
    EmojiTemplate("hi", "Hi"),
    EmojiTemplate("ok", "OK"),
    EmojiTemplate("thanks", "谢谢"),
    EmojiTemplate("haha", "哈哈"),
    EmojiTemplate("cry", "呜呜"),
    EmojiTemplate("love", "爱你"),
    EmojiTemplate("goodnight", "晚安"),
    EmojiTemplate("what", "什么?"),
    EmojiTemplate("busy", "搬砖"),
    EmojiTemplate("eat", "干饭"),
    EmojiTemplate("cheers", "干杯"),
    EmojiTemplate("no", "达咩"),
    EmojiTemplate("sorry", "对不起"),
    EmojiTemplate("awesome", "666"),
    EmojiTemplate("wait", "等下"),
    EmojiTemplate("confused", "懵"),
    EmojiTemplate("angry", "生气"),
    EmojiTemplate("tired", "心累"),
    EmojiTemplate("rich", "暴富"),
    EmojiTemplate("shocked", "震惊"),
    EmojiTemplate("bye", "拜拜"),
    EmojiTemplate("fighting", "加油"),
    EmojiTemplate("look", "暗中观察"),
    EmojiTemplate("shy", "害羞"),
]
