"""Message Tables - Localized text for coaching output.

Only text lives here; which message applies is decided in coach.py.
Titles and advice are str.format templates receiving ``bmi`` and ``steps``.
"""

from .models import InsightBranch, Language


ZH = Language.TRADITIONAL_CHINESE
EN = Language.ENGLISH
JA = Language.JAPANESE

DEFAULT_LANGUAGE = EN

TITLES: dict[InsightBranch, dict[Language, str]] = {
    InsightBranch.MAINTAIN_OVERWEIGHT: {
        ZH: "⚠️ 體重注意 (BMI: {bmi:.1f})",
        EN: "⚠️ BMI Alert: {bmi:.1f}",
        JA: "⚠️ BMI注意: {bmi:.1f}",
    },
    InsightBranch.MAINTAIN_UNDERWEIGHT: {
        ZH: "⚠️ 體重偏輕 (BMI: {bmi:.1f})",
        EN: "⚠️ Low BMI: {bmi:.1f}",
        JA: "⚠️ 低BMI注意: {bmi:.1f}",
    },
    InsightBranch.MAINTAIN_LOW_ACTIVITY: {
        ZH: "🌿 健康維持模式",
        EN: "🌿 Maintenance Mode",
        JA: "🌿 健康維持モード",
    },
    InsightBranch.MAINTAIN_ACTIVE: {
        ZH: "🌿 健康維持模式",
        EN: "🌿 Maintenance Mode",
        JA: "🌿 健康維持モード",
    },
    InsightBranch.LOSS_START: {
        ZH: "🏋️‍♂️ 減重啟動期",
        EN: "🏋️‍♂️ Start Phase",
        JA: "🏋️‍♂️ 減量開始期",
    },
    InsightBranch.LOSS_FAT_BURN: {
        ZH: "🔥 燃脂穩定期",
        EN: "🔥 Fat Burn Phase",
        JA: "🔥 燃焼安定期",
    },
    InsightBranch.LOSS_FINAL_SPRINT: {
        ZH: "🏆 最後衝刺期",
        EN: "🏆 Final Sprint",
        JA: "🏆 ラストスパート",
    },
    InsightBranch.GAIN_MUSCLE: {
        ZH: "💪 增肌建設期",
        EN: "💪 Muscle Gain",
        JA: "💪 増量期",
    },
}

ADVICE: dict[InsightBranch, dict[Language, str]] = {
    InsightBranch.MAINTAIN_OVERWEIGHT: {
        ZH: "雖然您未設定減重目標，但目前 BMI 已進入過重範圍。\n為了心血管健康，建議：\n1. 控制精緻澱粉攝取。\n2. 每日步數嘗試達到 8,000 步。",
        EN: "BMI indicates overweight.\n1. Limit refined carbs.\n2. Aim for 8,000 steps daily.",
        JA: "BMIが高めです。\n1. 糖質を控える。\n2. 1日8,000歩を目指す。",
    },
    InsightBranch.MAINTAIN_UNDERWEIGHT: {
        ZH: "目前 BMI 低於標準，可能影響免疫力。\n建議：\n1. 確保每日熱量攝取達標。\n2. 多補充優質蛋白質與堅果等好油。",
        EN: "BMI is below standard.\n1. Meet daily calories.\n2. Add healthy fats.",
        JA: "BMIが低いです。\n1. 摂取カロリーを確保。\n2. 良質な脂質を摂る。",
    },
    InsightBranch.MAINTAIN_LOW_ACTIVITY: {
        ZH: "體重標準，但今日活動量偏低 ({steps} 步)。\n建議多起來走動，維持基礎代謝率。",
        EN: "Weight is normal, but activity is low today ({steps} steps).\nWalk more to keep your metabolism up.",
        JA: "体重は標準ですが、今日の歩数が少ないです ({steps} 歩)。\n歩いて代謝を維持しましょう。",
    },
    InsightBranch.MAINTAIN_ACTIVE: {
        ZH: "太棒了！BMI 標準且活動量充足 ({steps} 步)。\n請繼續保持均衡飲食與良好作息。",
        EN: "Great job! Normal BMI and plenty of activity ({steps} steps).\nKeep up the balanced diet and good sleep.",
        JA: "素晴らしい！BMIは標準で活動量も十分です ({steps} 歩)。\nその調子でバランスの良い食事を続けましょう。",
    },
    InsightBranch.LOSS_START: {
        ZH: "建立習慣最重要：\n1. 戒除含糖飲料。\n2. 晚餐澱粉減半。\n3. 每天快走 30 分鐘。",
        EN: "Building habits matters most:\n1. Quit sugary drinks.\n2. Halve the carbs at dinner.\n3. Walk briskly for 30 minutes a day.",
        JA: "習慣づくりが最優先です：\n1. 甘い飲み物をやめる。\n2. 夕食の炭水化物を半分に。\n3. 毎日30分早歩き。",
    },
    InsightBranch.LOSS_FAT_BURN: {
        ZH: "進展不錯！若停滯可嘗試：\n1. 增加間歇運動 (HIIT)。\n2. 實施 168 斷食。\n3. 減少水果攝取。",
        EN: "Good progress! If you plateau, try:\n1. Adding interval training (HIIT).\n2. 16:8 intermittent fasting.\n3. Eating less fruit.",
        JA: "順調です！停滞したら：\n1. インターバル運動 (HIIT) を追加。\n2. 16:8 断食を試す。\n3. 果物を控える。",
    },
    InsightBranch.LOSS_FINAL_SPRINT: {
        ZH: "只差一點了！\n1. 控制鈉含量(消水腫)。\n2. 增加蛋白質維持肌肉。\n3. 睡前 3 小時禁食。",
        EN: "Almost there!\n1. Watch your sodium to reduce bloating.\n2. Eat more protein to keep muscle.\n3. No food 3 hours before bed.",
        JA: "あと少し！\n1. 塩分を控えてむくみ対策。\n2. タンパク質で筋肉を維持。\n3. 就寝3時間前は食べない。",
    },
    InsightBranch.GAIN_MUSCLE: {
        ZH: "1. 訓練前後補充足夠碳水。\n2. 每日蛋白質吃到體重 x 1.5倍。\n3. 攝取優質油脂。",
        EN: "1. Eat enough carbs around training.\n2. Get 1.5 g of protein per kg of body weight.\n3. Prioritize healthy fats.",
        JA: "1. トレーニング前後に炭水化物を補給。\n2. タンパク質は体重 x 1.5g。\n3. 良質な脂質を摂る。",
    },
}

OVER_BUDGET_ADVICE: dict[Language, str] = {
    ZH: "🚨 今日熱量超標！建議這餐只吃蔬菜與蛋白質，飯後散步 20 分鐘補救。",
    EN: "🚨 Over budget! Stick to vegetables and protein for this meal and walk for 20 minutes afterwards.",
    JA: "🚨 カロリー超過！この食事は野菜とタンパク質だけにして、食後に20分散歩しましょう。",
}

DAILY_KNOWLEDGE: dict[Language, list[str]] = {
    ZH: [
        "💡 **進食順序**：先吃膳食纖維(蔬菜)，再吃蛋白質，最後吃澱粉，能有效平穩血糖。",
        "💧 **水份攝取**：每公斤體重至少需要 30-40cc 的水。有時「餓」其實只是「渴」了。",
        "🥩 **蛋白質效應**：消化蛋白質需要消耗更多熱量。每餐至少要有一個手掌大的蛋白質。",
        "😴 **睡眠與體重**：睡眠不足會導致「飢餓素」上升，讓你隔天更想吃高糖高油食物。",
        "🍬 **隱形糖分**：小心醬料！番茄醬、燒烤醬通常含有大量的糖。",
        "🚶 **NEAT 效應**：非運動性消耗 (走路、站立) 佔了一天消耗的很大比例，多動比狂練更重要。",
        "⚖️ **體重波動**：一天內體重浮動 1-2 公斤是正常的。請看長期趨勢。",
    ],
    EN: [
        "💡 **Food Order**: Veggies first, then protein, carbs last to stabilize blood sugar.",
        "💧 **Hydration**: Drink 30-40ml water per kg. Thirst is often mistaken for hunger.",
        "🥩 **Protein**: Digesting protein burns calories. Eat a palm-sized portion per meal.",
        "😴 **Sleep**: Lack of sleep increases ghrelin (hunger hormone) and sugar cravings.",
        "🍬 **Hidden Sugar**: Sauces like ketchup often contain hidden sugar.",
        "🚶 **NEAT**: Walking and standing burn significant calories daily.",
        "⚖️ **Fluctuation**: Daily weight changes of 1-2kg are normal.",
    ],
    JA: [
        "💡 **食べる順番**: 野菜→タンパク質→炭水化物の順で食べると血糖値が安定します。",
        "💧 **水分補給**: 体重1kgあたり30-40mlの水が必要です。",
        "🥩 **タンパク質**: タンパク質の消化はカロリーを消費します。毎食摂取しましょう。",
        "😴 **睡眠**: 睡眠不足は食欲増進ホルモンを増やします。",
        "🍬 **隠れ糖分**: ソース類には糖分が多く含まれています。",
        "🚶 **NEAT**: 日常の歩行は重要なカロリー消費源です。",
        "⚖️ **体重変動**: 1日1-2kgの変動は正常です。",
    ],
}


def _pick(table: dict[Language, str], language: Language) -> str:
    return table.get(language) or table[DEFAULT_LANGUAGE]


def render_title(branch: InsightBranch, language: Language, **context) -> str:
    """Localized title for a coaching branch."""
    return _pick(TITLES[branch], language).format(**context)


def render_advice(branch: InsightBranch, language: Language, **context) -> str:
    """Localized advice for a coaching branch."""
    return _pick(ADVICE[branch], language).format(**context)


def render_over_budget(language: Language) -> str:
    return _pick(OVER_BUDGET_ADVICE, language)


def knowledge_tips(language: Language) -> list[str]:
    return DAILY_KNOWLEDGE.get(language) or DAILY_KNOWLEDGE[DEFAULT_LANGUAGE]
