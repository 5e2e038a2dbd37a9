# education_bank.py
# Patient education modules shown in the Education tab.
from typing import Dict, List

MODULES = [
    {"id": "1", "title": "Understanding Atherosclerosis", "category": "Cardiovascular Health", "duration": "10 min read",
     "content": ("Atherosclerosis is a condition where plaque builds up in your arteries, leading to reduced blood flow "
                 "and increased risk of heart attack and stroke. This silent condition develops over decades, often "
                 "starting in childhood."),
     "points": [
         "Atherosclerosis begins with endothelial injury caused by high cholesterol, smoking, or high blood pressure",
         "LDL cholesterol becomes oxidized and accumulates under the artery lining",
         "Immune cells (macrophages) transform into foam cells, forming fatty streaks",
         "Fibrous caps develop over time, and if they rupture, blood clots can form",
         "This process can lead to heart attacks, strokes, or peripheral vascular disease",
     ]},
    {"id": "2", "title": "Heart-Healthy Diet", "category": "Nutrition", "duration": "15 min read",
     "content": ("A Mediterranean-style diet rich in fruits, vegetables, whole grains, fish, and healthy fats can "
                 "significantly reduce cardiovascular risk. Studies show this dietary pattern can reverse plaque "
                 "buildup in arteries."),
     "points": [
         "Prioritize omega-3 rich fish (salmon, mackerel) at least twice weekly",
         "Use olive oil as primary cooking fat instead of butter or trans fats",
         "Include 5+ servings of fruits and vegetables daily",
         "Choose whole grains over refined carbohydrates",
         "Limit red meat, processed foods, and added sugars",
         "Nuts and seeds provide healthy fats and antioxidants",
     ]},
    {"id": "3", "title": "Exercise and Cardiovascular Health", "category": "Physical Activity", "duration": "12 min read",
     "content": ("Regular physical activity strengthens your heart, improves circulation, lowers blood pressure, and "
                 "helps maintain healthy cholesterol levels. The American Heart Association recommends 150 minutes of "
                 "moderate exercise weekly."),
     "points": [
         "Aim for 30-45 minutes of moderate exercise daily (brisk walking, cycling)",
         "Strength training 2-3 times per week improves heart health",
         "High-intensity interval training (HIIT) can be especially effective",
         "Consistency matters more than intensity - start with what you can do",
         "Exercise helps with weight management and stress reduction",
         "Even 10-minute activity bursts throughout the day provide benefits",
     ]},
    {"id": "4", "title": "Medications for Heart Health", "category": "Treatment", "duration": "18 min read",
     "content": ("Various medications can help manage cardiovascular risk factors and stabilize existing plaque. "
                 "Understanding how these medications work helps ensure proper adherence and optimal outcomes."),
     "points": [
         "Statins reduce LDL cholesterol and stabilize plaque to prevent rupture",
         "PCSK9 inhibitors can lower LDL to unprecedented levels (<30 mg/dL)",
         "Antiplatelets (Aspirin, Clopidogrel) prevent dangerous blood clots",
         "ACE inhibitors protect arteries and reduce inflammation",
         "Beta-blockers help manage blood pressure and heart rate",
         "Always take medications as prescribed and discuss any concerns with your doctor",
     ]},
    {"id": "5", "title": "Reversing Atherosclerosis", "category": "Prevention", "duration": "20 min read",
     "content": ("Emerging research shows that atherosclerosis can be reversed through aggressive lifestyle changes and "
                 "medical therapy. Pioneering studies by Dr. Dean Ornish and Dr. Caldwell Esselstyn demonstrate plaque "
                 "regression with comprehensive programs."),
     "points": [
         "Strict plant-based diets have reversed coronary plaque in clinical studies",
         "Combining diet, exercise, stress management, and social support yields best results",
         "PCSK9 inhibitors can achieve very low LDL levels, promoting plaque regression",
         "Intensive lifestyle changes can show results in as little as 1 year",
         "Regular monitoring (via imaging studies) can track progress",
         "Early intervention provides the greatest potential for reversal",
     ]},
    {"id": "6", "title": "Risk Factors and Prevention", "category": "Awareness", "duration": "15 min read",
     "content": ("Understanding and managing risk factors is crucial for preventing atherosclerosis. Many risk factors "
                 "are modifiable through lifestyle changes, while others require medical management."),
     "points": [
         "Modifiable risk factors: diet, exercise, smoking, stress, blood pressure, diabetes control",
         "Non-modifiable risk factors: age, genetics, family history",
         "Smoking cessation provides immediate cardiovascular benefits",
         "Blood pressure control (<130/80) is critical for artery health",
         "Diabetes management reduces risk of vascular complications",
         "Stress reduction through mindfulness, meditation, or counseling helps",
         "Regular health screenings detect problems before symptoms appear",
     ]},
]

CATEGORIES = ["All", "Cardiovascular Health", "Nutrition", "Physical Activity", "Treatment", "Prevention", "Awareness"]

def modules_in_category(category: str) -> List[Dict]:
    if category == "All":
        return list(MODULES)
    return [m for m in MODULES if m["category"] == category]
